"""
Core domain models for the glossing pipeline.

Defines typed structures for gloss tokens, grounding sources, partial token
updates returned by deep analysis, and the pipeline configuration model.

Token field names are the wire names used by the oracle and by exported
documents, so a document round-trips through ``model_dump``/``model_validate``
without any aliasing.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from hwaet.core.constants import (
    DEFAULT_API_BASE,
    DEFAULT_CONTEXT_RADIUS,
    DEFAULT_MAX_LINES,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_THINKING_BUDGET,
    DEFAULT_TIMEOUT,
    ENV_API_KEYS,
    ENV_MAX_LINES,
    ENV_MODEL,
    ESCAPED_LINE_BREAK,
    LINE_BREAK,
    LINE_BREAK_FIELDS,
)

DESCRIPTIVE_FIELDS = ("modernTranslation", "lemma", "partOfSpeech", "grammaticalInfo", "etymology")
REQUIRED_FIELDS = ("original", "modernTranslation", "lemma", "partOfSpeech", "grammaticalInfo", "isPunctuation")


class GlossConfig(BaseModel):
    """Configuration for the annotation oracle and the pipeline."""

    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    api_base: str = DEFAULT_API_BASE
    temperature: float = DEFAULT_TEMPERATURE
    thinking_budget: int = DEFAULT_THINKING_BUDGET
    timeout: float = DEFAULT_TIMEOUT
    max_lines: int = Field(default=DEFAULT_MAX_LINES, ge=1)
    context_radius: int = Field(default=DEFAULT_CONTEXT_RADIUS, ge=0)
    use_search_grounding: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> "GlossConfig":
        """Build a config from environment variables, then apply overrides."""
        values: Dict[str, Any] = {}
        for name in ENV_API_KEYS:
            if os.environ.get(name):
                values["api_key"] = os.environ[name]
                break
        if os.environ.get(ENV_MODEL):
            values["model"] = os.environ[ENV_MODEL]
        if os.environ.get(ENV_MAX_LINES):
            values["max_lines"] = int(os.environ[ENV_MAX_LINES])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class Source(BaseModel):
    """A grounding citation attached by deep analysis."""

    title: str
    uri: str


class Token(BaseModel):
    """A word, punctuation mark, or line-break marker with its gloss."""

    original: str
    modernTranslation: str
    lemma: str
    partOfSpeech: str
    grammaticalInfo: str
    etymology: str = ""
    isPunctuation: bool
    isFlagged: bool = False
    sources: Optional[List[Source]] = None

    @property
    def is_line_break(self) -> bool:
        return is_line_break_text(self.original)

    @property
    def text(self) -> str:
        """Surface text with surrounding whitespace removed."""
        return self.original.strip()

    @classmethod
    def line_break(cls) -> "Token":
        return cls(original=LINE_BREAK, isPunctuation=True, **LINE_BREAK_FIELDS)


class TokenUpdate(BaseModel):
    """
    Field overwrites for one token; unset fields are left alone.

    Deep analysis only fills the descriptive fields. A hand edit may also
    correct ``original``.
    """

    original: Optional[str] = None
    modernTranslation: Optional[str] = None
    lemma: Optional[str] = None
    partOfSpeech: Optional[str] = None
    grammaticalInfo: Optional[str] = None
    etymology: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class DeepAnalysisResult(BaseModel):
    """Field overwrites plus the citations the oracle grounded them on."""

    updates: TokenUpdate
    sources: List[Source] = Field(default_factory=list)


def is_line_break_text(text: str) -> bool:
    return text in (LINE_BREAK, ESCAPED_LINE_BREAK)
