"""
Tests for the Gemini client with a fake google-genai client
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from google.genai import errors as genai_errors

from analyzer_pipeline.core.ai import prompts
from analyzer_pipeline.core.ai.gemini_client import (
    NO_COMMENTS_TEXT,
    NO_TRANSCRIPT_TEXT,
    GeminiClient,
    TitleTrendAnalysis,
    classify_genai_error,
)
from analyzer_pipeline.core.errors import (
    AllCredentialsExhaustedError,
    FatalProviderError,
    NotFoundError,
    QuotaExhaustedError,
    TransientProviderError,
)


def api_error(code, status, message="error"):
    body = {"error": {"code": code, "message": message, "status": status}}
    if code >= 500:
        return genai_errors.ServerError(code, body)
    return genai_errors.ClientError(code, body)


class FakeGenai:
    """Stands in for genai.Client; `outcomes` maps an API key to a text or an exception."""

    def __init__(self, outcomes):
        self.outcomes = outcomes
        self.calls = []

    def __call__(self, api_key):
        client = MagicMock()

        def generate_content(model, contents, config=None):
            self.calls.append((api_key, model, contents, config))
            outcome = self.outcomes[api_key]
            if isinstance(outcome, Exception):
                raise outcome
            return SimpleNamespace(text=outcome)

        client.models.generate_content.side_effect = generate_content
        return client


class TestClassifyGenaiError:

    @pytest.mark.parametrize("code, status, expected", [
        (429, "RESOURCE_EXHAUSTED", QuotaExhaustedError),
        (404, "NOT_FOUND", NotFoundError),
        (503, "UNAVAILABLE", TransientProviderError),
        (400, "INVALID_ARGUMENT", FatalProviderError),
        (403, "PERMISSION_DENIED", FatalProviderError),
    ])
    def test_api_errors(self, code, status, expected):
        assert type(classify_genai_error(api_error(code, status))) is expected

    def test_transport_errors_are_transient(self):
        error = classify_genai_error(httpx.ConnectError("refused"))

        assert isinstance(error, TransientProviderError)
        assert error.reason == "network"


class TestGeminiClient:

    def test_rotates_to_next_key_on_quota(self, gemini_pool):
        fake = FakeGenai({"gm-key-A": api_error(429, "RESOURCE_EXHAUSTED"), "gm-key-B": "summary"})
        client = GeminiClient(gemini_pool, client_factory=fake)

        assert client.summarize_comments(["great video"]) == "summary"
        assert [c[0] for c in fake.calls] == ["gm-key-A", "gm-key-B"]
        assert gemini_pool.current_index == 1

    def test_all_keys_exhausted(self, gemini_pool):
        quota = api_error(429, "RESOURCE_EXHAUSTED")
        client = GeminiClient(gemini_pool, client_factory=FakeGenai({"gm-key-A": quota, "gm-key-B": quota}))

        with pytest.raises(AllCredentialsExhaustedError):
            client.generate("hello")

    def test_invalid_argument_is_not_retried(self, gemini_pool):
        fake = FakeGenai({"gm-key-A": api_error(400, "INVALID_ARGUMENT"), "gm-key-B": "never"})
        client = GeminiClient(gemini_pool, client_factory=fake)

        with pytest.raises(FatalProviderError):
            client.generate("hello")
        assert len(fake.calls) == 1

    def test_empty_inputs_skip_the_model(self, gemini_pool):
        fake = FakeGenai({})
        client = GeminiClient(gemini_pool, client_factory=fake)

        assert client.summarize_comments([]) == NO_COMMENTS_TEXT
        assert client.analyze_audience_insight([], "T") == NO_COMMENTS_TEXT
        assert client.summarize_transcript("   ", "T") == NO_TRANSCRIPT_TEXT
        assert fake.calls == []

    def test_prompt_uses_model_and_language(self, gemini_pool):
        fake = FakeGenai({"gm-key-A": "  ok  "})
        client = GeminiClient(gemini_pool, model="gemini-test", language="Vietnamese", client_factory=fake)

        assert client.summarize_transcript("words " * 10, "My Title") == "ok"
        _, model, contents, config = fake.calls[0]
        assert model == "gemini-test"
        assert "My Title" in contents
        assert "Vietnamese" in contents
        assert config is None

    def test_title_trends_parses_json(self, gemini_pool):
        payload = json.dumps({"overallAssessment": "Numbers work", "trendingTitles": ["A", "B"]})
        fake = FakeGenai({"gm-key-A": payload})
        client = GeminiClient(gemini_pool, client_factory=fake)

        result = client.analyze_title_trends(["Title one", "Title two"])

        assert result == TitleTrendAnalysis("Numbers work", ["A", "B"])
        config = fake.calls[0][3]
        assert config.response_mime_type == "application/json"

    def test_title_trends_invalid_json(self, gemini_pool):
        client = GeminiClient(gemini_pool, client_factory=FakeGenai({"gm-key-A": "not json"}))

        with pytest.raises(FatalProviderError) as exc_info:
            client.analyze_title_trends(["T"])

        assert exc_info.value.reason == "invalidJson"

    def test_clients_are_reused_per_key(self, gemini_pool):
        factory = MagicMock(side_effect=FakeGenai({"gm-key-A": "x"}))
        client = GeminiClient(gemini_pool, client_factory=factory)

        client.generate("one")
        client.generate("two")

        factory.assert_called_once_with(api_key="gm-key-A")


class TestPrompts:

    def test_comments_are_capped(self):
        prompt = prompts.comments_summary([f"comment {i}" for i in range(200)], "English")

        assert "comment 49" in prompt
        assert "comment 50" not in prompt

    def test_transcript_is_truncated(self):
        prompt = prompts.transcript_summary("x" * 20000, "T", "English")

        assert prompt.count("x") < 16000
