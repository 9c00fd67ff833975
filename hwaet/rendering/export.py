"""
Document import/export: full JSON dumps and CSV study cards for flagged tokens.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from hwaet.core.constants import ERROR_INVALID_IMPORT, EXPORT_FILENAME_TEMPLATE, STUDY_CSV_HEADERS
from hwaet.core.errors import ImportValidationError
from hwaet.core.models import Token
from hwaet.processing.context import sentence_context

logger = logging.getLogger(__name__)


def export_json(tokens: Sequence[Token]) -> Optional[str]:
    """Pretty-printed JSON array of the whole document, or None when empty."""
    if not tokens:
        return None
    return json.dumps([token.model_dump(mode="json") for token in tokens], indent=2, ensure_ascii=False)


def export_filename(today: Optional[date] = None) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(date=(today or date.today()).isoformat())


def load_document(raw: Any) -> List[Token]:
    """
    Validate an imported document and return its tokens.

    ``raw`` may be JSON text or already-decoded data. Only the first element
    is checked for the identifying ``original``/``lemma`` fields; every
    element must still be a valid token or nothing is imported.

    Raises:
        ImportValidationError: Not an array, or not gloss tokens
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ImportValidationError(f"Failed to parse JSON file. {ERROR_INVALID_IMPORT}") from exc

    if not isinstance(raw, list):
        raise ImportValidationError(ERROR_INVALID_IMPORT)
    if not raw:
        return []

    first = raw[0]
    if not isinstance(first, dict) or first.get("original") is None or first.get("lemma") is None:
        raise ImportValidationError(ERROR_INVALID_IMPORT)

    try:
        tokens = [Token.model_validate(item) for item in raw]
    except ValidationError as exc:
        logger.error("Rejected import: %s", exc)
        raise ImportValidationError(ERROR_INVALID_IMPORT) from exc
    logger.info("Imported %d token(s)", len(tokens))
    return tokens


def flagged_indices(tokens: Sequence[Token]) -> List[int]:
    """Document indices of flagged tokens, ascending."""
    return [index for index, token in enumerate(tokens) if token.isFlagged]


def definition_block(token: Token) -> str:
    """Back-of-card HTML for a token, on a single line."""
    block = (
        f"<p><b>Meaning:</b> {token.modernTranslation}</p>\n"
        f"<p><b>Grammar:</b> {token.grammaticalInfo}</p>\n"
        f"<p><i>{token.partOfSpeech}</i></p>\n"
    )
    if token.etymology:
        block += f"<small>{token.etymology}</small>"
    return block.strip().replace("\n", "")


def csv_cell(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def csv_row(cells: Sequence[str]) -> str:
    return ",".join(csv_cell(cell) for cell in cells)


def export_study_csv(tokens: Sequence[Token]) -> Optional[str]:
    """
    One study card per flagged token, in document order.

    Returns None when nothing is flagged.
    """
    indices = flagged_indices(tokens)
    if not indices:
        return None
    rows = [csv_row(STUDY_CSV_HEADERS)]
    for index in indices:
        token = tokens[index]
        rows.append(csv_row([token.lemma, sentence_context(tokens, index), definition_block(token)]))
    return "\n".join(rows)
