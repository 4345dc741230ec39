"""Google Drive link parsing and viewer URLs."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

BARE_ID_LENGTH: int = 33

# Order matters: first match wins.
_ID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/file/d/([^/?&#]+)"),
    re.compile(r"[?&]id=([^&#]+)"),
    re.compile(r"/d/([^/?&#]+)"),
)

SHARE_HOSTS: frozenset[str] = frozenset(
    {
        "drive.google.com",
        "docs.google.com",
        "drive.usercontent.google.com",
    }
)


def extract_file_id(value: Optional[str]) -> Optional[str]:
    """
    Extract a Drive file id from a pasted link or a CSV field.

    Returns None when nothing id-like can be found; callers turn that into a
    validation error.
    """
    if not value or not isinstance(value, str):
        return None

    s = value.strip()
    if len(s) == BARE_ID_LENGTH and "/" not in s and "=" not in s:
        return s

    for pattern in _ID_PATTERNS:
        match = pattern.search(s)
        if match and match.group(1):
            return match.group(1)

    return _id_from_share_link(s)


def _id_from_share_link(value: str) -> Optional[str]:
    try:
        parsed = urlparse(value if "://" in value else f"https://{value}")
        host = (parsed.hostname or "").lower()
    except ValueError:
        # Malformed netloc (e.g. an unbalanced IPv6 bracket).
        return None
    if host not in SHARE_HOSTS:
        return None
    ids = parse_qs(parsed.query).get("id")
    if ids and ids[0]:
        return ids[0]
    return None


def is_link(value: str) -> bool:
    """Return True if a field looks like a URL rather than a bare id."""
    return "/" in value or "=" in value


def preview_url(file_id: str) -> str:
    """Embeddable player URL for a Drive video."""
    return f"https://drive.google.com/file/d/{file_id}/preview"


def thumbnail_url(file_id: str, size: int = 400) -> str:
    return f"https://drive.google.com/thumbnail?id={file_id}&sz=w{size}"
