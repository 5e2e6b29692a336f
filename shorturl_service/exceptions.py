"""Exceptions raised by the store, the shortcode allocator and the URL service.

Classes:
    ShortenerError:
        Generic base class for URL shortener exceptions.

    InvalidInputError:
        Base class for user-correctable input errors (reported as 400).

    InvalidURLError:
        Raised when the target URL is malformed or not http/https.

    InvalidShortcodeError:
        Raised when a custom shortcode is not 3-20 alphanumeric characters.

    InvalidValidityError:
        Raised when the validity window is not a whole number of minutes in range.

    ShortcodeAlreadyExistsError:
        Raised when a live record already occupies the requested shortcode.

    ShortcodeNotFoundError:
        Raised when a shortcode is unknown or has expired.

    ShortcodeExpiredError:
        Raised when a lookup has just evicted an expired record. Subclass of
        ShortcodeNotFoundError, so callers that do not care about the
        difference can catch the parent only.

    ShortcodeExhaustedError:
        Raised when the allocator could not find a free random shortcode
        within its attempt budget.

Example:
    >>> from shorturl_service.exceptions import ShortcodeAlreadyExistsError
    >>> raise ShortcodeAlreadyExistsError("Shortcode 'abc123' already exists")
    Traceback (most recent call last):
        ...
    shorturl_service.exceptions.ShortcodeAlreadyExistsError: Shortcode 'abc123' already exists
"""


class ShortenerError(Exception):
    """Generic base class for URL shortener exceptions."""

    pass


class InvalidInputError(ShortenerError):
    """Base class for user-correctable input errors."""

    pass


class InvalidURLError(InvalidInputError):
    """Exception raised when the URL to shorten is invalid."""

    pass


class InvalidShortcodeError(InvalidInputError):
    """Exception raised when a custom shortcode has an invalid format."""

    pass


class InvalidValidityError(InvalidInputError):
    """Exception raised when the validity window is out of range."""

    pass


class ShortcodeAlreadyExistsError(ShortenerError):
    """Exception raised when a shortcode is already taken by a live record."""

    pass


class ShortcodeNotFoundError(ShortenerError):
    """Exception raised when a shortcode is unknown or expired."""

    pass


class ShortcodeExpiredError(ShortcodeNotFoundError):
    """Exception raised when a shortcode existed but its validity has lapsed."""

    pass


class ShortcodeExhaustedError(ShortenerError):
    """Exception raised when no free random shortcode could be generated."""

    pass
