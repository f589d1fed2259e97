"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urlparse

_MAX_ERROR_CHARS = 240


class UrlGuardError(ValueError):
    """Raised when a service URL is unsafe or malformed."""


def clip(text: str, *, limit: int = _MAX_ERROR_CHARS) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def validate_service_url(url: str, *, allow_schemes: Sequence[str] = ("http", "https")) -> str:
    """Check a service root URL and return it without trailing slash or fragment."""
    parsed = urlparse((url or "").strip())
    scheme = (parsed.scheme or "").lower()
    allowed_schemes = tuple(s.lower() for s in allow_schemes)
    if scheme not in allowed_schemes:
        raise UrlGuardError(f"scheme not allowed: {scheme or 'missing'}")
    # Tokens belong in the Authorization header, never in the URL.
    if parsed.username or parsed.password:
        raise UrlGuardError("credentials in url are not allowed")
    host = (parsed.hostname or "").strip()
    if not host:
        raise UrlGuardError("url host is missing")
    try:
        parsed.port
    except ValueError as exc:
        raise UrlGuardError("invalid url port") from exc
    if parsed.query:
        raise UrlGuardError("query strings are not allowed in the service url")
    normalized = parsed._replace(fragment="").geturl()
    return normalized.rstrip("/")
