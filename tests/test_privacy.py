"""
Tests for PII redaction and client identifiers.
"""

from datetime import datetime, timezone

import pytest

from baynav.privacy import (
    REDACTED,
    client_ip_from_headers,
    hash_client_ip,
    sanitize_query,
    simplify_user_agent,
)


class TestSanitizeQuery:

    @pytest.mark.parametrize("pii", [
        "123-45-6789",
        "123456789",
        "jane.doe@example.com",
        "510-555-0123",
        "(510) 555-0123",
        "4111 1111 1111 1111",
        "000123456789012",
    ])
    def test_redacted(self, pii):
        sanitized = sanitize_query(f"my info is {pii} please help")
        assert pii not in sanitized
        assert REDACTED in sanitized

    def test_zip_code_survives(self):
        assert sanitize_query("senior transportation in 94612") == "senior transportation in 94612"

    def test_plain_text_unchanged(self):
        assert sanitize_query("I need food help") == "I need food help"

    def test_empty(self):
        assert sanitize_query("") == ""


class TestClientHash:

    def test_stable_within_a_day(self):
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert hash_client_ip("203.0.113.9", now) == hash_client_ip("203.0.113.9", now)

    def test_rotates_daily(self):
        day1 = datetime(2026, 3, 1, tzinfo=timezone.utc)
        day2 = datetime(2026, 3, 2, tzinfo=timezone.utc)
        assert hash_client_ip("203.0.113.9", day1) != hash_client_ip("203.0.113.9", day2)

    def test_shape(self):
        digest = hash_client_ip("203.0.113.9")
        assert len(digest) == 16
        int(digest, 16)

    def test_unknown(self):
        assert hash_client_ip(None) == "unknown"
        assert hash_client_ip("") == "unknown"

    def test_forwarded_for_first_hop(self):
        assert client_ip_from_headers("203.0.113.9, 10.0.0.1", "10.0.0.2") == "203.0.113.9"
        assert client_ip_from_headers(None, "10.0.0.2") == "10.0.0.2"
        assert client_ip_from_headers(None, None) is None


class TestUserAgent:

    @pytest.mark.parametrize("ua,expected", [
        ("Mozilla/5.0 (iPhone) Mobile/15E148 Safari/604.1", "mobile"),
        ("Mozilla/5.0 (X11; Linux) Chrome/120.0 Safari/537.36", "chrome"),
        ("Mozilla/5.0 (X11; Linux; rv:121.0) Firefox/121.0", "firefox"),
        ("Mozilla/5.0 (Macintosh) Version/17.0 Safari/605.1.15", "safari"),
        ("curl/8.4.0", "other"),
        (None, "unknown"),
    ])
    def test_family(self, ua, expected):
        assert simplify_user_agent(ua) == expected
