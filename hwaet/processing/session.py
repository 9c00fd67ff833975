"""
In-memory gloss session: owns the document token sequence and applies the
whole-document replacements and per-token patches callers ask for.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from hwaet.core.errors import AnalysisFailed, HwaetError
from hwaet.core.models import GlossConfig, Source, Token, TokenUpdate
from hwaet.processing.annotate import GlossAnnotator
from hwaet.processing.context import sentence_context, window_context
from hwaet.rendering.export import export_json, export_study_csv, flagged_indices, load_document

logger = logging.getLogger(__name__)


class GlossSession:
    """A single user's document for the lifetime of the session."""

    def __init__(
        self,
        annotator: Optional[GlossAnnotator] = None,
        config: Optional[GlossConfig] = None,
        tokens: Optional[Sequence[Token]] = None,
    ) -> None:
        self._annotator = annotator
        self.config = config or (annotator.config if annotator is not None else GlossConfig.from_env())
        self.tokens: List[Token] = list(tokens or [])

    @property
    def annotator(self) -> GlossAnnotator:
        if self._annotator is None:
            self._annotator = GlossAnnotator(config=self.config)
        return self._annotator

    def __len__(self) -> int:
        return len(self.tokens)

    def _run_pipeline(self, text: str, progress: bool = False) -> List[Token]:
        try:
            return self.annotator.analyze_text(text, progress=progress)
        except HwaetError as exc:
            logger.error("Analysis failed: %s", exc, exc_info=True)
            raise AnalysisFailed() from exc

    def analyze(self, text: str, progress: bool = False) -> List[Token]:
        """
        Replace the document with a fresh analysis of ``text``.

        The current document is kept if the run fails.

        :raises AnalysisFailed: Any pipeline failure, cause chained
        """
        self.tokens = self._run_pipeline(text, progress=progress)
        return self.tokens

    def append(self, new_tokens: Sequence[Token]) -> List[Token]:
        """Append tokens, separated by a paragraph break if needed."""
        if self.tokens and not self.tokens[-1].is_line_break:
            self.tokens.extend([Token.line_break(), Token.line_break()])
        self.tokens.extend(new_tokens)
        return self.tokens

    def append_text(self, text: str, progress: bool = False) -> List[Token]:
        return self.append(self._run_pipeline(text, progress=progress))

    def _token_at(self, index: int) -> Token:
        if not 0 <= index < len(self.tokens):
            raise IndexError(f"token index {index} out of range for {len(self.tokens)} tokens")
        return self.tokens[index]

    def toggle_flag(self, index: int) -> Token:
        token = self._token_at(index)
        self.tokens[index] = token.model_copy(update={"isFlagged": not token.isFlagged})
        return self.tokens[index]

    def update_token(
        self,
        index: int,
        updates: TokenUpdate,
        sources: Optional[List[Source]] = None,
    ) -> Token:
        """Overwrite descriptive fields; the flag is never touched."""
        token = self._token_at(index)
        changes = updates.model_dump(exclude_none=True)
        if sources is not None:
            changes["sources"] = list(sources)
        self.tokens[index] = token.model_copy(update=changes)
        return self.tokens[index]

    def context_at(self, index: int) -> str:
        return window_context(self.tokens, index, radius=self.config.context_radius)

    def sentence_at(self, index: int) -> str:
        return sentence_context(self.tokens, index)

    def deep_analyze(self, index: int) -> Token:
        """
        Re-analyze one word in context and patch it in place.

        :raises DeepAnalysisError: The token is left unchanged
        :raises ValueError: The token is punctuation or a line break
        """
        token = self._token_at(index)
        if token.isPunctuation:
            raise ValueError(f"token {index} ({token.original!r}) is punctuation")
        result = self.annotator.deep_analyze(token, self.context_at(index))
        logger.info("Deep analysis of %r returned %d source(s)", token.original, len(result.sources))
        return self.update_token(index, result.updates, sources=result.sources)

    def flagged(self) -> List[Token]:
        return [self.tokens[index] for index in flagged_indices(self.tokens)]

    def import_json(self, raw: Any) -> List[Token]:
        """Replace the document with an imported one; nothing changes on failure."""
        self.tokens = load_document(raw)
        return self.tokens

    def export_json(self) -> Optional[str]:
        return export_json(self.tokens)

    def export_study_csv(self) -> Optional[str]:
        return export_study_csv(self.tokens)

    def reset(self) -> None:
        self.tokens = []
