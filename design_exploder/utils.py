"""Utility helpers for URL resolution and classification."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

DATA_URI_PREFIX = "data:"


def resolve_url(base: str, reference: str) -> str:
    """Resolve ``reference`` against ``base``; malformed input comes back unchanged."""
    try:
        return urljoin(base, reference)
    except ValueError:
        return reference


def is_data_uri(value: str) -> bool:
    return value.strip().lower().startswith(DATA_URI_PREFIX)


def is_absolute_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def is_valid_target_url(value: str) -> bool:
    """Only http(s) URLs with a host are accepted as extraction targets."""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value.strip())
        # Accessing .port validates the port number.
        parsed.port
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)
