"""
HTTP client for the annotation oracle (Gemini ``generateContent`` REST API).

One request per call: the session is pooled but never retries, so a failed
call surfaces immediately and the caller decides what to do with it.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from hwaet.core.constants import ERROR_API_KEY_MISSING
from hwaet.core.errors import ConfigurationError, OracleTransportError
from hwaet.core.models import GlossConfig, Source

logger = logging.getLogger(__name__)


@dataclass
class OracleResponse:
    """Text body of an oracle reply plus any grounding citations."""

    text: Optional[str]
    sources: List[Source] = field(default_factory=list)


class OracleClient:
    """
    Thin client over the oracle's REST endpoint:
    - Connection pooling through a shared ``requests.Session``
    - Structured output via ``responseSchema``
    - Optional Google Search grounding with citation extraction
    """

    def __init__(self, config: Optional[GlossConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the oracle client.

        :param config: Pipeline configuration (model, key, endpoint, timeout)
        :param session: Pre-built session, mainly for tests
        """
        self.config = config or GlossConfig.from_env()
        self.session = session or self._build_session()

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(
            max_retries=Retry(total=0, raise_on_status=False),
            pool_connections=4,
            pool_maxsize=8,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/models/{self.config.model}:generateContent"

    def build_payload(
        self,
        prompt: str,
        response_schema: Optional[Dict[str, Any]] = None,
        use_search: bool = False,
    ) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "temperature": self.config.temperature,
            "thinkingConfig": {"thinkingBudget": self.config.thinking_budget},
        }
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if use_search:
            payload["tools"] = [{"google_search": {}}]
        return payload

    def generate(
        self,
        prompt: str,
        response_schema: Optional[Dict[str, Any]] = None,
        use_search: bool = False,
    ) -> OracleResponse:
        """
        Send one prompt to the oracle.

        :param prompt: Natural-language instruction plus the text to analyze
        :param response_schema: Schema the reply must conform to, if any
        :param use_search: Attach the Google Search grounding tool
        :return: Reply text (``None`` when the oracle returned none) and sources
        :raises ConfigurationError: No API key is configured
        :raises OracleTransportError: The request failed or the body was not JSON
        """
        if not self.config.api_key:
            raise ConfigurationError(ERROR_API_KEY_MISSING)

        payload = self.build_payload(prompt, response_schema=response_schema, use_search=use_search)
        logger.debug("POST %s (%d prompt chars)", self.endpoint, len(prompt))
        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                timeout=self.config.timeout,
                headers={
                    "x-goog-api-key": self.config.api_key,
                    "User-Agent": "Hwaet/1.0 (Philology Study Tool)",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise OracleTransportError(f"Oracle request failed with HTTP {status}") from exc
        except json.JSONDecodeError as exc:
            raise OracleTransportError("Oracle returned a non-JSON body") from exc
        except requests.exceptions.RequestException as exc:
            raise OracleTransportError(f"Oracle request failed: {exc}") from exc

        return OracleResponse(text=extract_text(data), sources=extract_sources(data))


def _first_candidate(data: Dict[str, Any]) -> Dict[str, Any]:
    candidates = data.get("candidates") or []
    return candidates[0] if candidates and isinstance(candidates[0], dict) else {}


def extract_text(data: Dict[str, Any]) -> Optional[str]:
    """Concatenate the non-thought text parts of the first candidate."""
    content = _first_candidate(data).get("content") or {}
    parts = [
        part.get("text", "")
        for part in content.get("parts") or []
        if isinstance(part, dict) and not part.get("thought")
    ]
    text = "".join(parts)
    return text if text.strip() else None


def extract_sources(data: Dict[str, Any]) -> List[Source]:
    """Web grounding chunks as ordered sources, deduplicated by URI."""
    metadata = _first_candidate(data).get("groundingMetadata") or {}
    sources: List[Source] = []
    seen = set()
    for chunk in metadata.get("groundingChunks") or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not web or not web.get("uri"):
            continue
        uri = web["uri"]
        if uri in seen:
            continue
        seen.add(uri)
        sources.append(Source(title=web.get("title") or uri, uri=uri))
    return sources
