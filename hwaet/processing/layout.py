"""
Layout stage: quote pairing, punctuation attachment, and the inter-token
spacing decision for each token of the gloss view.

Words render with horizontal padding and punctuation does not, so an
attachment between mismatched neighbours cancels only the padded side.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from hwaet.core.constants import AMPERSAND, DASHES, NEUTRAL_QUOTE, OPENERS, SPACING_CLASSES
from hwaet.core.models import Token


class QuoteRole(str, Enum):
    OPEN = "open"
    CLOSE = "close"


class Spacing(str, Enum):
    """Gap rendered after a token."""

    DEFAULT_GAP = "default"
    CANCEL_BOTH = "cancel_both"
    CANCEL_ONE = "cancel_one"
    FLUSH = "flush"
    LINE_BREAK = "line_break"

    @property
    def css_class(self) -> str:
        return SPACING_CLASSES[self.value]


@dataclass
class TokenLayout:
    index: int
    token: Token
    spacing: Spacing
    quote_role: Optional[QuoteRole] = None

    @property
    def css_class(self) -> str:
        return self.spacing.css_class


def compute_quote_roles(tokens: Sequence[Token]) -> Dict[int, QuoteRole]:
    """
    Classify every neutral double quote as opening or closing.

    Single left-to-right pass: occurrences alternate open, close, open, ...
    """
    roles: Dict[int, QuoteRole] = {}
    quote_open = False
    for index, token in enumerate(tokens):
        if token.text != NEUTRAL_QUOTE:
            continue
        roles[index] = QuoteRole.CLOSE if quote_open else QuoteRole.OPEN
        quote_open = not quote_open
    return roles


def has_padding(token: Token) -> bool:
    return not token.isPunctuation


def is_left_attaching(token: Optional[Token], index: int, roles: Dict[int, QuoteRole]) -> bool:
    """True when no space should precede the token."""
    if token is None or token.is_line_break:
        return False
    text = token.text
    if not text:
        return False
    if text == NEUTRAL_QUOTE:
        return roles.get(index) == QuoteRole.CLOSE
    if token.isPunctuation:
        return text not in DASHES and text != AMPERSAND and text not in OPENERS
    return False


def is_right_attaching(token: Optional[Token], index: int, roles: Dict[int, QuoteRole]) -> bool:
    """True when no space should follow the token."""
    if token is None or token.is_line_break:
        return False
    text = token.text
    if text == NEUTRAL_QUOTE:
        return roles.get(index) == QuoteRole.OPEN
    return text in OPENERS


def spacing_between(current: Token, following: Optional[Token], attach: bool) -> Spacing:
    """Padding-aware gap between two neighbours."""
    if not attach:
        return Spacing.DEFAULT_GAP
    current_pad = has_padding(current)
    following_pad = following is not None and has_padding(following)
    if current_pad and following_pad:
        return Spacing.CANCEL_BOTH
    if current_pad or following_pad:
        return Spacing.CANCEL_ONE
    return Spacing.FLUSH


def resolve_spacing(tokens: Sequence[Token], roles: Optional[Dict[int, QuoteRole]] = None) -> List[Spacing]:
    """Spacing after each token, one entry per token."""
    if roles is None:
        roles = compute_quote_roles(tokens)

    result: List[Spacing] = []
    for index, token in enumerate(tokens):
        if token.is_line_break:
            result.append(Spacing.LINE_BREAK)
            continue
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        attach = is_right_attaching(token, index, roles) or is_left_attaching(following, index + 1, roles)
        result.append(spacing_between(token, following, attach))
    return result


def layout_tokens(tokens: Sequence[Token]) -> List[TokenLayout]:
    roles = compute_quote_roles(tokens)
    spacing = resolve_spacing(tokens, roles)
    return [
        TokenLayout(index=index, token=token, spacing=spacing[index], quote_role=roles.get(index))
        for index, token in enumerate(tokens)
    ]
