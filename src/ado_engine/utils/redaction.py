"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import base64
import re
from typing import Iterable, Optional

REDACTED = "***REDACTED***"
_AUTH_HEADER_RE = re.compile(r"(Authorization:\s*(?:Basic|Bearer)\s+)\S+", re.IGNORECASE)


def _secret_forms(secret: str) -> Iterable[str]:
    yield secret
    # Basic auth carries ":<token>" base64 encoded.
    yield base64.b64encode(f":{secret}".encode("utf-8")).decode("ascii")


def redact_secret(text: str, secret: Optional[str]) -> str:
    """Replace every occurrence of ``secret`` (and its basic-auth form) in ``text``."""
    redacted = _AUTH_HEADER_RE.sub(lambda m: m.group(1) + REDACTED, text)
    if not secret:
        return redacted
    for form in _secret_forms(secret):
        redacted = redacted.replace(form, REDACTED)
    return redacted
