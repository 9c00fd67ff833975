"""
Pytest configuration for test discovery and shared fixtures.

Ensures the project root is on sys.path so that ``import hwaet`` works
regardless of how pytest is invoked (e.g., ``pytest`` or ``pytest tests/``),
and provides token factories plus a scripted stand-in for the oracle client.
"""

import json
import os
import sys
from typing import Any, List, Optional

import pytest


def _ensure_project_root_on_sys_path(sys_path: List[str]) -> None:
    """
    Add the project root directory to sys.path if it is not already present.

    :param sys_path: The current Python sys.path list.
    :return: None
    """
    tests_dir = os.path.dirname(__file__)
    project_root = os.path.abspath(os.path.join(tests_dir, os.pardir))
    if project_root not in sys_path:
        sys_path.insert(0, project_root)


_ensure_project_root_on_sys_path(sys.path)

from hwaet.core.models import GlossConfig, Source, Token  # noqa: E402
from hwaet.processing.api_client import OracleResponse  # noqa: E402


def word(text: str, lemma: Optional[str] = None, **fields: Any) -> Token:
    """Helper to create a word token."""
    values = {
        "original": text,
        "modernTranslation": f"gloss of {text}",
        "lemma": lemma or text.lower(),
        "partOfSpeech": "Noun",
        "grammaticalInfo": "Nom. sg.",
        "etymology": "",
        "isPunctuation": False,
    }
    values.update(fields)
    return Token(**values)


def punct(text: str) -> Token:
    """Helper to create punctuation token."""
    return Token(
        original=text,
        modernTranslation=text,
        lemma=text,
        partOfSpeech="Punctuation",
        grammaticalInfo="N/A",
        etymology="N/A",
        isPunctuation=True,
    )


def token_record(text: str, is_punct: bool = False, **fields: Any) -> dict:
    """An oracle-shaped token record."""
    record = {
        "original": text,
        "modernTranslation": "meaning",
        "lemma": text.lower(),
        "partOfSpeech": "Punctuation" if is_punct else "Noun",
        "grammaticalInfo": "N/A",
        "etymology": "N/A",
        "isPunctuation": is_punct,
    }
    record.update(fields)
    return record


class FakeOracleClient:
    """Replays scripted replies and records every prompt it is sent."""

    def __init__(self, replies: List[Any], config: Optional[GlossConfig] = None):
        self.replies = list(replies)
        self.config = config or GlossConfig(api_key="test-key", use_search_grounding=False)
        self.calls: List[dict] = []

    def generate(self, prompt, response_schema=None, use_search=False):
        self.calls.append({"prompt": prompt, "response_schema": response_schema, "use_search": use_search})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, OracleResponse):
            return reply
        if reply is None or isinstance(reply, str):
            return OracleResponse(text=reply)
        return OracleResponse(text=json.dumps(reply, ensure_ascii=False))


@pytest.fixture
def config():
    return GlossConfig(api_key="test-key", use_search_grounding=False, max_lines=2)


@pytest.fixture
def hwaet_sentence():
    """Hē cwæð. Þā ēode."""
    return [word("Hē"), word("cwæð"), punct("."), word("Þā"), word("ēode"), punct(".")]


@pytest.fixture
def sample_source():
    return Source(title="Bosworth-Toller: cwethan", uri="https://bosworthtoller.com/6942")
