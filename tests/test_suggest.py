"""
Tests for the text-suggestion collaborator.

These tests verify:
    1. Refined descriptions pass through; empty replies keep the original
    2. Duration parsing with the 25 minute fallback
    3. optimize() keeps the user's inputs when the service fails
    4. The Ollama provider request shape
"""

import pytest
import requests

from focusflow.suggest import provider
from focusflow.suggest.service import Suggestion, TextSuggester


class ScriptedModel:
    """Stands in for the language model: answers by prompt kind."""

    def __init__(self, description: str = "Ship the first draft.", duration: str = '{"minutes": 90}'):
        self.description = description
        self.duration = duration
        self.prompts: list[tuple[str, object]] = []

    def __call__(self, prompt: str, fmt=None) -> str:
        self.prompts.append((prompt, fmt))
        return self.duration if fmt == "json" else self.description


def failing_model(prompt: str, fmt=None) -> str:
    raise requests.ConnectionError("ollama unreachable")


class TestRefineDescription:

    def test_returns_model_text(self):
        suggester = TextSuggester(generate=ScriptedModel(description="  Write intro and outline.  "))
        assert suggester.refine_description("Report", "write stuff") == "Write intro and outline."

    def test_empty_reply_keeps_original(self):
        suggester = TextSuggester(generate=ScriptedModel(description=""))
        assert suggester.refine_description("Report", "write stuff") == "write stuff"

    def test_prompt_mentions_title(self):
        model = ScriptedModel()
        TextSuggester(generate=model).refine_description("Quarterly report", "")
        assert "Quarterly report" in model.prompts[0][0]


class TestSuggestDuration:

    def test_parses_minutes(self):
        suggester = TextSuggester(generate=ScriptedModel(duration='{"minutes": 45}'))
        assert suggester.suggest_duration("Email") == 45

    def test_requests_json(self):
        model = ScriptedModel()
        TextSuggester(generate=model).suggest_duration("Email")
        assert model.prompts[0][1] == "json"

    def test_float_minutes_rounded(self):
        suggester = TextSuggester(generate=ScriptedModel(duration='{"minutes": 37.6}'))
        assert suggester.suggest_duration("Email") == 38

    @pytest.mark.parametrize("reply", [
        "about an hour", "", "[]", '{"mins": 30}', '{"minutes": "30"}',
        '{"minutes": 0}', '{"minutes": -5}', '{"minutes": true}',
    ])
    def test_malformed_falls_back_to_default(self, reply):
        suggester = TextSuggester(generate=ScriptedModel(duration=reply))
        assert suggester.suggest_duration("Email") == 25

    def test_custom_default(self):
        suggester = TextSuggester(generate=ScriptedModel(duration="?"), default_minutes=50)
        assert suggester.suggest_duration("Email") == 50


class TestOptimize:

    def test_success(self):
        suggestion = TextSuggester(generate=ScriptedModel()).optimize("Report", "draft", 25)
        assert suggestion == Suggestion(description="Ship the first draft.", minutes=90)
        assert suggestion.hours_minutes == (1, 30)

    def test_service_failure_keeps_inputs(self):
        suggestion = TextSuggester(generate=failing_model).optimize("Report", "draft", 40)
        assert suggestion == Suggestion(description="draft", minutes=40)

    def test_empty_title_skips_service(self):
        model = ScriptedModel()
        suggestion = TextSuggester(generate=model).optimize("  ", "draft", 40)
        assert suggestion.description == "draft"
        assert model.prompts == []


class FakeResponse:

    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


class TestOllamaProvider:

    def test_posts_generate_request(self, monkeypatch):
        calls = {}

        def fake_post(url, json, timeout):
            calls.update(url=url, json=json, timeout=timeout)
            return FakeResponse({"response": "ok"})

        monkeypatch.setattr(provider.requests, "post", fake_post)
        assert provider.ollama_generate("hello", fmt="json") == "ok"
        assert calls["url"].endswith("/api/generate")
        assert calls["json"]["prompt"] == "hello"
        assert calls["json"]["format"] == "json"
        assert calls["json"]["stream"] is False

    def test_missing_response_field(self, monkeypatch):
        monkeypatch.setattr(provider.requests, "post", lambda url, json, timeout: FakeResponse({}))
        assert provider.ollama_generate("hello") == ""

    def test_non_object_body_rejected(self, monkeypatch):
        monkeypatch.setattr(
            provider.requests, "post", lambda url, json, timeout: FakeResponse(["not", "an", "object"])
        )
        with pytest.raises(ValueError):
            provider.ollama_generate("hello")

    def test_optimize_keeps_inputs_on_non_object_body(self, monkeypatch):
        monkeypatch.setattr(
            provider.requests, "post", lambda url, json, timeout: FakeResponse(["not", "an", "object"])
        )
        result = TextSuggester(generate=provider.ollama_generate).optimize("Write report", "draft", 40)
        assert result == Suggestion(description="draft", minutes=40)
