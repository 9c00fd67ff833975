"""
Ingestion utilities: normalization and segmentation of raw input text into
bounded line groups for the annotation oracle.
"""

from __future__ import annotations

import unicodedata
from typing import List

from hwaet.core.constants import DEFAULT_MAX_LINES, LINE_BREAK


def normalize_text(text: str) -> str:
    """NFC normalize and unify line endings; line contents are kept verbatim."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFC", text)
    return normalized.replace("\r\n", LINE_BREAK).replace("\r", LINE_BREAK)


def split_lines(text: str) -> List[str]:
    """Split on line breaks; empty text has no lines."""
    if not text:
        return []
    return text.split(LINE_BREAK)


def split_into_segments(text: str, max_lines: int = DEFAULT_MAX_LINES) -> List[str]:
    """
    Group every ``max_lines`` consecutive lines into one segment.

    Lines are never split, and the line breaks inside a segment are kept so
    the oracle can emit its line-break tokens. Only the last segment may be
    shorter than ``max_lines``. Empty input yields no segments.

    Args:
        text: Raw input text
        max_lines: Maximum number of lines per segment

    Returns:
        Ordered list of segment strings
    """
    if max_lines < 1:
        raise ValueError(f"max_lines must be at least 1, got {max_lines}")
    lines = split_lines(normalize_text(text))
    return [LINE_BREAK.join(lines[i : i + max_lines]) for i in range(0, len(lines), max_lines)]
