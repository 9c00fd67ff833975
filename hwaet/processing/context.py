"""
Context extraction around a token: a flat window for display, and the
enclosing sentence for study export.
"""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from hwaet.core.constants import DEFAULT_CONTEXT_RADIUS, SENTENCE_TERMINATORS
from hwaet.core.models import Token

_WHITESPACE = re.compile(r"\s+")


def _check_index(tokens: Sequence[Token], index: int) -> None:
    if not 0 <= index < len(tokens):
        raise IndexError(f"token index {index} out of range for {len(tokens)} tokens")


def is_sentence_terminator(token: Token) -> bool:
    return token.isPunctuation and any(mark in token.original for mark in SENTENCE_TERMINATORS)


def window_context(tokens: Sequence[Token], index: int, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
    """
    Up to ``radius`` tokens either side of ``index`` as a single line.

    Line breaks become spaces and whitespace runs collapse.
    """
    if not tokens:
        return ""
    _check_index(tokens, index)
    start = max(0, index - radius)
    end = min(len(tokens) - 1, index + radius)
    parts = [" " if token.is_line_break else token.original for token in tokens[start : end + 1]]
    return _WHITESPACE.sub(" ", " ".join(parts)).strip()


def sentence_bounds(tokens: Sequence[Token], index: int) -> Tuple[int, int]:
    """
    Inclusive span of the sentence containing ``index``.

    The span starts just after the previous terminator and ends on the next
    terminator (or the document edges).
    """
    _check_index(tokens, index)
    start = index
    while start > 0 and not is_sentence_terminator(tokens[start - 1]):
        start -= 1
    end = index
    while end < len(tokens) - 1 and not is_sentence_terminator(tokens[end]):
        end += 1
    return start, end


def sentence_context(tokens: Sequence[Token], index: int, emphasize: bool = True) -> str:
    """
    Rebuild the sentence around ``index`` as text, target wrapped in ``<b>``.

    Every punctuation mark is glued to whatever precedes it. Line breaks are
    skipped so the sentence stays on one line.
    """
    if not tokens:
        return ""
    start, end = sentence_bounds(tokens, index)

    parts: List[str] = []
    for i in range(start, end + 1):
        token = tokens[i]
        if token.is_line_break and i != index:
            continue
        text = token.original
        if emphasize and i == index:
            text = f"<b>{text}</b>"
        if token.isPunctuation and parts:
            parts[-1] = parts[-1].rstrip() + text + " "
        else:
            parts.append(text + " ")
    return "".join(parts).strip()
