"""
Gemini Client
Summaries and audience analysis over the Gemini key pool.
"""

import json
import logging
from dataclasses import dataclass, asdict, field
from typing import Any, Callable, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import (
    FatalProviderError,
    NotFoundError,
    ProviderError,
    QuotaExhaustedError,
    TransientProviderError,
)
from ..keys.key_pool import ApiKeyPool
from ..keys.key_rotator import KeyRotator
from . import prompts

logger = logging.getLogger(__name__)

_PROVIDER = "gemini"

DEFAULT_MODEL = "gemini-2.5-flash"

NO_COMMENTS_TEXT = "No comments available to analyse."
NO_TRANSCRIPT_TEXT = "No content to summarise."


@dataclass
class TitleTrendAnalysis:
    """Structured result of the title trend analysis."""
    overall_assessment: str
    trending_titles: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


TITLE_TREND_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "overallAssessment": types.Schema(type=types.Type.STRING),
        "trendingTitles": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
        ),
    },
    required=["overallAssessment", "trendingTitles"],
)


def classify_genai_error(error: Exception) -> ProviderError:
    """Maps google-genai and transport errors to a structured error kind."""
    if isinstance(error, genai_errors.APIError):
        code = error.code or 0
        status = error.status or ""
        message = f"Gemini API error: HTTP {code} ({status}) {error.message or ''}".strip()
        if code == 429 or status == "RESOURCE_EXHAUSTED":
            return QuotaExhaustedError(message, provider=_PROVIDER, reason=status or "RESOURCE_EXHAUSTED")
        if code == 404:
            return NotFoundError(message, provider=_PROVIDER, reason=status)
        if code >= 500:
            return TransientProviderError(message, provider=_PROVIDER, reason=status)
        return FatalProviderError(message, provider=_PROVIDER, reason=status)
    return TransientProviderError(f"Gemini network error: {error}", provider=_PROVIDER, reason="network")


class GeminiClient:
    """
    Text generation on top of google-genai.

    Each call runs through a KeyRotator, so a key that hits its quota is
    replaced by the next one in the pool transparently.
    """

    def __init__(
        self,
        pool: ApiKeyPool,
        model: str = DEFAULT_MODEL,
        language: str = "English",
        client_factory: Callable[..., Any] = genai.Client,
    ):
        self._rotator = KeyRotator(pool)
        self._model = model
        self._language = language
        self._client_factory = client_factory
        self._clients: Dict[str, Any] = {}

    @property
    def rotator(self) -> KeyRotator:
        return self._rotator

    def _client(self, api_key: str):
        client = self._clients.get(api_key)
        if client is None:
            client = self._clients[api_key] = self._client_factory(api_key=api_key)
        return client

    def _generate_with_key(self, api_key: str, prompt: str, schema: Optional[types.Schema]) -> str:
        config = None
        if schema is not None:
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            )
        try:
            response = self._client(api_key).models.generate_content(
                model=self._model,
                contents=prompt,
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise classify_genai_error(e) from e
        return (response.text or "").strip()

    def generate(self, prompt: str, schema: Optional[types.Schema] = None) -> str:
        """Runs one prompt, rotating keys on quota exhaustion."""
        return self._rotator.run(lambda key: self._generate_with_key(key, prompt, schema))

    def summarize_comments(self, comments: List[str]) -> str:
        if not comments:
            return NO_COMMENTS_TEXT
        return self.generate(prompts.comments_summary(comments, self._language))

    def summarize_transcript(self, transcript: str, title: str) -> str:
        if not transcript or not transcript.strip():
            return NO_TRANSCRIPT_TEXT
        return self.generate(prompts.transcript_summary(transcript, title, self._language))

    def analyze_audience_insight(self, comments: List[str], title: str) -> str:
        if not comments:
            return NO_COMMENTS_TEXT
        return self.generate(prompts.audience_insight(comments, title, self._language))

    def analyze_title_trends(self, titles: List[str]) -> TitleTrendAnalysis:
        """
        Raises:
            FatalProviderError: The model returned something that is not the expected JSON.
        """
        raw = self.generate(prompts.title_trends(titles, self._language), schema=TITLE_TREND_SCHEMA)
        try:
            data = json.loads(raw)
            return TitleTrendAnalysis(
                overall_assessment=str(data["overallAssessment"]),
                trending_titles=[str(t) for t in data.get("trendingTitles", [])],
            )
        except (ValueError, KeyError, TypeError) as e:
            raise FatalProviderError(
                f"Gemini returned an invalid title trend analysis: {e}", provider=_PROVIDER, reason="invalidJson"
            ) from e
