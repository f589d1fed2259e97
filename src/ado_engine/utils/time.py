"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

# The service emits up to 7 fractional digits; fromisoformat only takes 6.
_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from the pipeline service.

    Returns a timezone-aware datetime (UTC assumed when no offset is given),
    or None for empty or unparseable input.
    """
    if not value:
        return None
    text = value.strip().replace("Z", "+00:00")
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_rfc1123(value: Optional[datetime]) -> str:
    """Format as RFC 1123 (``Mon, 02 Jan 2006 15:04:05 GMT``); ``unknown`` for None."""
    if value is None:
        return "unknown"
    return format_datetime(value.astimezone(timezone.utc).replace(microsecond=0), usegmt=True)
