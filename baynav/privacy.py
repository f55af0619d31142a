"""
Privacy helpers: PII redaction for queries, and coarse client identifiers
that are safe to log and to key rate limits on.
"""

import re
import hashlib
from datetime import datetime, timezone
from typing import Optional

REDACTED = "[REDACTED]"

# Applied in order; SSNs before phone numbers, cards before bare account numbers
PII_PATTERNS = [
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),                               # SSN
    re.compile(r"\b\d{9}\b"),                                           # SSN without dashes
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),  # email
    re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"),                   # phone
    re.compile(r"\(\d{3}\)\s*\d{3}[-.\s]?\d{4}"),                       # phone, (510) style
    re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{1,7}\b"),        # card number
    re.compile(r"\b\d{8,17}\b"),                                        # bank account
]


def sanitize_query(query: str) -> str:
    """Replace anything that looks like PII with [REDACTED]. ZIP codes survive."""
    if not query:
        return query
    for pattern in PII_PATTERNS:
        query = pattern.sub(REDACTED, query)
    return query


def hash_client_ip(ip: Optional[str], now: Optional[datetime] = None) -> str:
    """
    16-hex-char SHA-256 of the IP with a salt that rotates every UTC day,
    so hashes cannot be correlated across days.
    """
    if not ip:
        return "unknown"
    now = now or datetime.now(timezone.utc)
    salt = f"baynavigator-{now.strftime('%Y-%m-%d')}"
    return hashlib.sha256((ip + salt).encode("utf-8")).hexdigest()[:16]


def simplify_user_agent(user_agent: Optional[str]) -> str:
    """Browser family only, no version details."""
    if not user_agent:
        return "unknown"
    if "Mobile" in user_agent:
        return "mobile"
    if "Chrome" in user_agent:
        return "chrome"
    if "Firefox" in user_agent:
        return "firefox"
    if "Safari" in user_agent:
        return "safari"
    if "Edge" in user_agent:
        return "edge"
    return "other"


def client_ip_from_headers(forwarded_for: Optional[str], peer_host: Optional[str]) -> Optional[str]:
    """First X-Forwarded-For hop, else the socket peer."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return peer_host or None
