import asyncio
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from shorturl_service.exceptions import (
    InvalidShortcodeError,
    InvalidURLError,
    InvalidValidityError,
    ShortcodeAlreadyExistsError,
    ShortcodeExpiredError,
    ShortcodeNotFoundError,
)
from shorturl_service.models.url import ClickData


def parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestURLShortener:
    """Test URL shortener HTTP API"""

    def test_create_short_url(self, client: TestClient):
        """Test creating a short URL"""
        response = client.post("/shorturls", json={"url": "https://www.google.com/"})
        assert response.status_code == 201

        data = response.json()
        assert set(data) == {"shortcode", "originalUrl", "shortUrl", "expiresAt", "createdAt"}
        assert len(data["shortcode"]) == 6
        assert data["originalUrl"] == "https://www.google.com/"
        assert data["shortUrl"].endswith(f"/{data['shortcode']}")

    def test_default_validity_is_30_minutes(self, client: TestClient):
        data = client.post("/shorturls", json={"url": "https://www.google.com/"}).json()
        assert parse_iso(data["expiresAt"]) - parse_iso(data["createdAt"]) == timedelta(minutes=30)

    def test_custom_validity(self, client: TestClient):
        data = client.post("/shorturls", json={"url": "https://example.com", "validity": 120}).json()
        assert parse_iso(data["expiresAt"]) - parse_iso(data["createdAt"]) == timedelta(minutes=120)

    def test_create_with_custom_shortcode(self, client: TestClient):
        response = client.post("/shorturls", json={"url": "https://example.com", "shortcode": "mylink"})
        assert response.status_code == 201
        assert response.json()["shortcode"] == "mylink"

    def test_custom_shortcode_conflict(self, client: TestClient):
        """Test that a live custom shortcode cannot be reused"""
        client.post("/shorturls", json={"url": "https://example.com", "shortcode": "abc123"})

        response = client.post("/shorturls", json={"url": "https://other.com", "shortcode": "abc123"})
        assert response.status_code == 409

    def test_custom_shortcode_reusable_after_expiry(self, client: TestClient, clock):
        client.post("/shorturls", json={"url": "https://example.com", "shortcode": "abc123"})
        clock.advance(minutes=31)

        response = client.post("/shorturls", json={"url": "https://other.com", "shortcode": "abc123"})
        assert response.status_code == 201
        assert response.json()["originalUrl"] == "https://other.com/"

    @pytest.mark.parametrize("shortcode", ["ab", "ab_12", "x" * 21])
    def test_invalid_custom_shortcode(self, client: TestClient, shortcode):
        response = client.post("/shorturls", json={"url": "https://example.com", "shortcode": shortcode})
        assert response.status_code == 400

    @pytest.mark.parametrize("validity", [0, -5, 10081, 1.5, "soon", "30", "10080", True])
    def test_invalid_validity(self, client: TestClient, validity):
        response = client.post("/shorturls", json={"url": "https://example.com", "validity": validity})
        assert response.status_code == 400

    def test_max_validity_accepted(self, client: TestClient):
        response = client.post("/shorturls", json={"url": "https://example.com", "validity": 10080})
        assert response.status_code == 201

    @pytest.mark.parametrize("url", ["not-a-valid-url", "ftp://example.com/file", "", "/relative/path"])
    def test_invalid_url(self, client: TestClient, url):
        """Test creating URL with invalid URL"""
        response = client.post("/shorturls", json={"url": url})
        assert response.status_code == 400

    def test_long_url_accepted(self, client: TestClient):
        long_url = "https://example.com/" + "a" * 2100

        response = client.post("/shorturls", json={"url": long_url})
        assert response.status_code == 201

        shortcode = response.json()["shortcode"]
        redirect = client.get(f"/{shortcode}", follow_redirects=False)
        assert redirect.headers["location"] == long_url

    def test_missing_url(self, client: TestClient):
        response = client.post("/shorturls", json={"validity": 30})
        assert response.status_code == 400

    def test_redirect_url(self, client: TestClient):
        """Test URL redirection"""
        create_response = client.post("/shorturls", json={"url": "https://www.github.com/"})
        shortcode = create_response.json()["shortcode"]

        response = client.get(f"/{shortcode}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_nonexistent_url(self, client: TestClient):
        """Test redirecting non-existent URL"""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404

    def test_redirect_expired_url(self, client: TestClient, clock):
        """Test that an expired short URL is gone, then not found"""
        client.post("/shorturls", json={"url": "https://example.com", "validity": 1, "shortcode": "brief"})
        clock.advance(minutes=2)

        response = client.get("/brief", follow_redirects=False)
        assert response.status_code == 410

        response = client.get("/brief", follow_redirects=False)
        assert response.status_code == 404

    def test_url_analytics(self, client: TestClient):
        """Test getting URL analytics after redirects"""
        create_response = client.post("/shorturls", json={"url": "https://www.stackoverflow.com/"})
        shortcode = create_response.json()["shortcode"]

        client.get(
            f"/{shortcode}",
            headers={"user-agent": "pytest-agent", "referer": "https://ref.example", "x-forwarded-for": "9.9.9.9"},
            follow_redirects=False
        )
        client.get(f"/{shortcode}", headers={"x-forwarded-for": "9.9.9.9, 10.0.0.1"}, follow_redirects=False)
        client.get(f"/{shortcode}", headers={"x-forwarded-for": "8.8.8.8"}, follow_redirects=False)

        response = client.get(f"/shorturls/{shortcode}/analytics")
        assert response.status_code == 200

        data = response.json()
        assert data["shortcode"] == shortcode
        assert data["originalUrl"] == "https://www.stackoverflow.com/"
        assert data["clickCount"] == 3
        assert data["uniqueClickerCount"] == 2
        assert len(data["clicks"]) == 3

        first = data["clicks"][0]
        assert set(first) == {"timestamp", "userAgent", "ip", "referer"}
        assert first["userAgent"] == "pytest-agent"
        assert first["referer"] == "https://ref.example"
        assert first["ip"] == "9.9.9.9"

    def test_analytics_nonexistent_url(self, client: TestClient):
        response = client.get("/shorturls/nonexistent/analytics")
        assert response.status_code == 404

    def test_analytics_expired_url(self, client: TestClient, clock):
        """Test that analytics treat expired like never existed"""
        client.post("/shorturls", json={"url": "https://example.com", "shortcode": "abc123"})
        clock.advance(minutes=31)

        response = client.get("/shorturls/abc123/analytics")
        assert response.status_code == 404

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert set(data) == {"status", "timestamp", "service", "version", "environment"}

    def test_request_id_header(self, client: TestClient):
        response = client.get("/health", headers={"x-request-id": "req-42"})
        assert response.headers["x-request-id"] == "req-42"
        assert client.get("/health").headers["x-request-id"]


class TestURLService:
    """Test URL service business logic directly"""

    def test_create_then_find(self, url_service):
        """Test that a created URL is found with identical fields"""
        record = asyncio.run(url_service.create_short_url("https://www.example.com/"))

        found = asyncio.run(url_service.get_url_by_shortcode(record.shortcode))
        assert found.original_url == record.original_url == "https://www.example.com/"
        assert found.created_at == record.created_at
        assert found.expires_at == record.expires_at
        assert found.clicks == []

    def test_urls_are_normalized(self, url_service):
        """Test that pydantic normalizes URLs (adds trailing slash to bare hosts)"""
        record = asyncio.run(url_service.create_short_url("  HTTPS://Example.COM  "))
        assert record.original_url == "https://example.com/"

    def test_same_url_gets_distinct_shortcodes(self, url_service):
        url1 = asyncio.run(url_service.create_short_url("https://www.test.com/"))
        url2 = asyncio.run(url_service.create_short_url("https://www.test.com/"))
        assert url1.shortcode != url2.shortcode

    @pytest.mark.parametrize("validity", [0, 10081, -1, True, 2.5])
    def test_rejects_out_of_range_validity(self, url_service, validity):
        with pytest.raises(InvalidValidityError):
            asyncio.run(url_service.create_short_url("https://example.com", validity=validity))

    @pytest.mark.parametrize("validity", [1, 30, 10080])
    def test_accepts_validity_in_range(self, url_service, validity):
        record = asyncio.run(url_service.create_short_url("https://example.com", validity=validity))
        assert record.expires_at - record.created_at == timedelta(minutes=validity)

    def test_rejects_invalid_url(self, url_service):
        with pytest.raises(InvalidURLError):
            asyncio.run(url_service.create_short_url("javascript:alert(1)"))

    def test_custom_shortcode_scenarios(self, url_service):
        """Test that 'ab' and 'ab_12' are rejected and 'abc12' accepted"""
        with pytest.raises(InvalidShortcodeError):
            asyncio.run(url_service.create_short_url("https://example.com", shortcode="ab"))
        with pytest.raises(InvalidShortcodeError):
            asyncio.run(url_service.create_short_url("https://example.com", shortcode="ab_12"))

        record = asyncio.run(url_service.create_short_url("https://example.com", shortcode="abc12"))
        assert record.shortcode == "abc12"

    def test_empty_custom_shortcode_generates_one(self, url_service):
        record = asyncio.run(url_service.create_short_url("https://example.com", shortcode=""))
        assert len(record.shortcode) == 6

    def test_conflict_then_reuse_after_expiry(self, url_service, clock):
        """Test the abc123 conflict scenario and reuse once expired"""
        asyncio.run(url_service.create_short_url("https://example.com", shortcode="abc123"))

        with pytest.raises(ShortcodeAlreadyExistsError):
            asyncio.run(url_service.create_short_url("https://other.com", shortcode="abc123"))

        clock.advance(minutes=31)
        record = asyncio.run(url_service.create_short_url("https://other.com", shortcode="abc123"))
        assert record.original_url == "https://other.com/"
        assert record.clicks == []

    def test_resolve_redirect_records_click(self, url_service):
        record = asyncio.run(url_service.create_short_url("https://example.com/page"))

        target = asyncio.run(url_service.resolve_redirect(record.shortcode, ClickData(ip="1.2.3.4")))

        assert target == "https://example.com/page"
        analytics = asyncio.run(url_service.get_url_analytics(record.shortcode))
        assert analytics.click_count == 1
        assert analytics.clicks[0].ip == "1.2.3.4"

    def test_resolve_redirect_expired_then_missing(self, url_service, clock):
        record = asyncio.run(url_service.create_short_url("https://example.com", validity=5))
        clock.advance(minutes=5)

        with pytest.raises(ShortcodeExpiredError):
            asyncio.run(url_service.resolve_redirect(record.shortcode, ClickData()))

        with pytest.raises(ShortcodeNotFoundError) as exc_info:
            asyncio.run(url_service.resolve_redirect(record.shortcode, ClickData()))
        assert not isinstance(exc_info.value, ShortcodeExpiredError)

    def test_long_url_is_accepted(self, url_service):
        """Test that URLs beyond 2083 characters are not rejected for length"""
        long_url = "https://example.com/" + "a" * 2100

        record = asyncio.run(url_service.create_short_url(long_url))

        assert record.original_url == long_url
