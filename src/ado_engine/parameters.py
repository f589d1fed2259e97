"""
runpipeline
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

SEPARATOR = "="


@dataclass(frozen=True)
class ParameterSet:
    values: Dict[str, str] = field(default_factory=dict)
    rejected: Tuple[str, ...] = ()


def split_parameter(entry: str) -> Optional[Tuple[str, str]]:
    """Split ``key=value`` on the first separator; ``None`` when there is none.

    Values may themselves contain ``=`` (``url=https://x?a=b`` keeps ``https://x?a=b``).
    """
    key, sep, value = entry.partition(SEPARATOR)
    if not sep:
        return None
    return key, value


def parse_parameters(raw: Optional[Iterable[str]]) -> ParameterSet:
    values: Dict[str, str] = {}
    rejected = []
    for entry in raw or ():
        pair = split_parameter(entry)
        if pair is None:
            logger.warning("Parameter '%s' does not contain '%s'; skipping it.", entry, SEPARATOR)
            rejected.append(entry)
            continue
        key, value = pair
        # Later entries win.
        values[key] = value
    return ParameterSet(values=values, rejected=tuple(rejected))
