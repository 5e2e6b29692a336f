"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern to allow different random draws.

A strategy only produces a candidate code. Uniqueness against the store is
checked by ShortcodeAllocator.
"""

import secrets
import string
from abc import ABC, abstractmethod


ALPHABET = string.ascii_letters + string.digits  # 62 symbols


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self) -> str:
        """
        Generate one candidate short code.

        Returns:
            A random alphanumeric string
        """
        pass


class UniformRandomShortCodeStrategy(ShortCodeStrategy):
    """
    Uniform random strategy backed by the OS CSPRNG.

    secrets.choice uses rejection sampling internally, so every symbol of the
    alphabet is equally likely.

    Keyspace at length 6: 62^6 ~ 5.7e10
    """

    def __init__(self, length: int = 6):
        if length < 1:
            raise ValueError(f"Short code length must be positive (given value: {length})")
        self.length = length
        self.characters = ALPHABET

    def generate(self) -> str:
        return ''.join(secrets.choice(self.characters) for _ in range(self.length))


class ByteModuloShortCodeStrategy(ShortCodeStrategy):
    """
    Random byte modulo alphabet size.

    256 is not a multiple of 62, so byte values 248-255 wrap onto the first 8
    symbols ('a'-'h'). Each of those is drawn with probability 5/256 instead
    of 4/256. Kept for compatibility with codes issued by older deployments.
    """

    def __init__(self, length: int = 6):
        if length < 1:
            raise ValueError(f"Short code length must be positive (given value: {length})")
        self.length = length
        self.characters = ALPHABET

    def generate(self) -> str:
        return ''.join(
            self.characters[byte % len(self.characters)]
            for byte in secrets.token_bytes(self.length)
        )
