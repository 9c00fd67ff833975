"""
Annotation: per-segment token analysis, single-token deep analysis, and the
sequential all-or-nothing document pipeline.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from hwaet.core.errors import (
    DeepAnalysisError,
    OracleTransportError,
    SegmentAnnotationError,
)
from hwaet.core.models import (
    DESCRIPTIVE_FIELDS,
    REQUIRED_FIELDS,
    DeepAnalysisResult,
    GlossConfig,
    Token,
    TokenUpdate,
    is_line_break_text,
)
from hwaet.core.utils import extract_json_text
from hwaet.processing.api_client import OracleClient
from hwaet.processing.ingest import split_into_segments

logger = logging.getLogger(__name__)

TOKEN_ARRAY_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "original": {
                "type": "STRING",
                "description": "The word, punctuation, or '\\n' for a newline.",
            },
            "modernTranslation": {
                "type": "STRING",
                "description": "Modern English definition. For '\\n', return 'Line Break'.",
            },
            "lemma": {
                "type": "STRING",
                "description": "Standard West Saxon headword. For '\\n', return 'N/A'.",
            },
            "partOfSpeech": {
                "type": "STRING",
                "description": "Part of speech. For '\\n', return 'Formatting'.",
            },
            "grammaticalInfo": {
                "type": "STRING",
                "description": "Contextual morphology (case, number, gender, etc.). For '\\n', return 'N/A'.",
            },
            "etymology": {
                "type": "STRING",
                "description": "Brief etymology notes. For '\\n', return 'N/A'.",
            },
            "isPunctuation": {
                "type": "BOOLEAN",
                "description": "True if punctuation or newline ('\\n').",
            },
        },
        "required": list(REQUIRED_FIELDS),
    },
}

TOKEN_UPDATE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "modernTranslation": {"type": "STRING", "description": "Modern English definition in this context."},
        "lemma": {"type": "STRING", "description": "Standard West Saxon headword."},
        "partOfSpeech": {"type": "STRING", "description": "Part of speech."},
        "grammaticalInfo": {"type": "STRING", "description": "Contextual morphology (case, number, gender, etc.)."},
        "etymology": {"type": "STRING", "description": "Etymology notes with cognates."},
    },
    "required": list(DESCRIPTIVE_FIELDS),
}

SEGMENT_PROMPT = """You are an expert philologist specializing in Old English.
Analyze Chunk {number} of {total}.
Break it down into tokens (words, punctuation, and newlines).

RULES:
- Output EXACTLY as JSON.
- Preserve visual structure: If a newline exists, output a token where "original" is "\\n".
- Do not output tokens for spaces.
- Provide rich grammatical morphology for the specific context.

Text to analyze:
"{text}"
"""

DEEP_PROMPT = """You are an expert philologist specializing in Old English.
Re-examine a single word from a text, checking standard references
(Bosworth-Toller, Wiktionary, grammars) for its headword and meaning.

Word: "{original}"
Current lemma: "{lemma}"
Context: "{context}"

Give the meaning, headword, part of speech and morphology for THIS occurrence,
and an etymology with cognates.
"""

DEEP_SCHEMA_INSTRUCTION = """
Respond with a single JSON object and nothing else, of this shape:
{schema}
"""


def _validate_token_record(record: Any, position: int) -> Dict[str, Any]:
    if not isinstance(record, dict):
        raise ValueError(f"token {position} is not an object")
    missing = [name for name in REQUIRED_FIELDS if name not in record or record[name] is None]
    if missing:
        raise ValueError(f"token {position} is missing {', '.join(missing)}")
    if not isinstance(record["isPunctuation"], bool):
        raise ValueError(f"token {position} has a non-boolean isPunctuation")
    for name in REQUIRED_FIELDS[:-1]:
        if not isinstance(record[name], str):
            raise ValueError(f"token {position} has a non-string {name}")
    return record


def parse_token_array(text: str) -> List[Token]:
    """
    Parse and validate an oracle reply into tokens.

    Line-break tokens are normalized to the sentinel token, one per break in
    a whitespace-only token (so a stanza break stays two lines). Other
    whitespace-only tokens are dropped.

    Raises:
        ValueError: The text is not a JSON array of complete token records
    """
    data = extract_json_text(text)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of tokens")

    tokens: List[Token] = []
    for position, record in enumerate(data):
        record = _validate_token_record(record, position)
        original = record["original"]
        if is_line_break_text(original):
            tokens.append(Token.line_break())
            continue
        if not original.strip() and ("\n" in original or "\r" in original):
            breaks = original.replace("\r\n", "\n").replace("\r", "\n").count("\n")
            tokens.extend(Token.line_break() for _ in range(breaks))
            continue
        if not original.strip():
            logger.debug("Dropping whitespace-only token at %d", position)
            continue
        record = {key: value for key, value in record.items() if key in Token.model_fields}
        record.pop("isFlagged", None)
        record.pop("sources", None)
        if record.get("etymology") is None:
            record["etymology"] = ""
        tokens.append(Token.model_validate(record))
    return tokens


def parse_token_update(text: str) -> TokenUpdate:
    """
    Parse a deep-analysis reply into field updates.

    Raises:
        ValueError: Not a JSON object, or no descriptive field present
    """
    data = extract_json_text(text)
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    fields = {
        name: value
        for name, value in data.items()
        if name in DESCRIPTIVE_FIELDS and isinstance(value, str) and value.strip()
    }
    update = TokenUpdate(**fields)
    if update.is_empty():
        raise ValueError("reply carried none of the descriptive fields")
    return update


def merge_segments(segment_tokens: Iterable[List[Token]]) -> List[Token]:
    """Concatenate per-segment token lists in submission order."""
    merged: List[Token] = []
    for tokens in segment_tokens:
        merged.extend(tokens)
    return merged


class GlossAnnotator:
    """Annotation client: prompts the oracle and validates what comes back."""

    def __init__(self, client: Optional[OracleClient] = None, config: Optional[GlossConfig] = None) -> None:
        self.config = config or (client.config if client is not None else GlossConfig.from_env())
        self.client = client or OracleClient(self.config)

    def annotate_segment(self, segment_text: str, segment_index: int, total_segments: int) -> List[Token]:
        """
        Annotate one segment.

        :raises SegmentAnnotationError: Empty or malformed reply
        :raises OracleTransportError: The request itself failed
        """
        prompt = SEGMENT_PROMPT.format(number=segment_index + 1, total=total_segments, text=segment_text)
        response = self.client.generate(prompt, response_schema=TOKEN_ARRAY_SCHEMA)

        if not response.text:
            raise SegmentAnnotationError(
                f"The scribe returned an empty scroll for segment {segment_index + 1}.",
                segment_index=segment_index,
            )
        try:
            tokens = parse_token_array(response.text)
        except (ValueError, ValidationError) as exc:
            logger.error("Segment %d parse error: %s; reply was: %.500s", segment_index + 1, exc, response.text)
            raise SegmentAnnotationError(
                f"Failed to parse analysis for segment {segment_index + 1}. The response was malformed.",
                segment_index=segment_index,
            ) from exc
        if not tokens:
            raise SegmentAnnotationError(
                f"The scribe returned an empty scroll for segment {segment_index + 1}.",
                segment_index=segment_index,
            )
        return tokens

    def analyze_text(self, text: str, progress: bool = False) -> List[Token]:
        """
        Run the whole document through the oracle, one segment at a time.

        Blank segments are not sent. Any segment failure aborts the run and
        nothing fetched so far is returned.

        :raises SegmentAnnotationError: With the failing segment's index
        """
        segments = [segment for segment in split_into_segments(text, self.config.max_lines) if segment.strip()]
        total = len(segments)
        logger.info("Annotating %d segment(s)", total)

        collected: List[List[Token]] = []
        for index, segment in enumerate(tqdm(segments, desc="Segments", unit="seg", disable=not progress)):
            try:
                collected.append(self.annotate_segment(segment, index, total))
            except SegmentAnnotationError:
                logger.error("Aborting document: segment %d of %d failed", index + 1, total)
                collected.clear()
                raise
            except OracleTransportError as exc:
                logger.error("Aborting document: segment %d of %d failed", index + 1, total)
                collected.clear()
                raise SegmentAnnotationError(
                    f"Oracle request failed for segment {index + 1}.", segment_index=index
                ) from exc

        return merge_segments(collected)

    def deep_analyze(self, token: Token, context: str) -> DeepAnalysisResult:
        """
        Re-analyze a single token in its context, with grounding citations.

        :raises DeepAnalysisError: No text or no usable structure came back
        """
        prompt = DEEP_PROMPT.format(original=token.original, lemma=token.lemma, context=context)
        use_search = self.config.use_search_grounding
        if use_search:
            prompt += DEEP_SCHEMA_INSTRUCTION.format(schema=json.dumps(TOKEN_UPDATE_SCHEMA, indent=2))

        try:
            response = self.client.generate(
                prompt,
                response_schema=None if use_search else TOKEN_UPDATE_SCHEMA,
                use_search=use_search,
            )
        except OracleTransportError as exc:
            raise DeepAnalysisError(f"Deep analysis request failed for '{token.original}'.") from exc

        if not response.text:
            raise DeepAnalysisError(f"No deep analysis returned for '{token.original}'.")
        try:
            updates = parse_token_update(response.text)
        except (ValueError, ValidationError) as exc:
            logger.error("Deep analysis parse error for %r: %s", token.original, exc)
            raise DeepAnalysisError(f"Deep analysis for '{token.original}' was malformed.") from exc

        return DeepAnalysisResult(updates=updates, sources=response.sources)
