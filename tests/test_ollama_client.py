"""
Tests for the Ollama text-generation client
"""
import json

import httpx
import pytest

from ai_calendar.llm.client import OllamaClient, OpenAIChatClient, TextGenerationError, build_text_generator


def _client(handler):
    return OllamaClient("http://ollama.test", transport=httpx.MockTransport(handler))


def _generate(client):
    return client.generate("prompt text", model="llama3.1:latest", temperature=0.1, max_tokens=1000)


class TestOllamaClient:
    def test_posts_generate_request(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": '{"operation_type": "FindEvent"}'})

        assert _generate(_client(handler)) == '{"operation_type": "FindEvent"}'
        assert seen["path"] == "/api/generate"
        assert seen["body"] == {
            "model": "llama3.1:latest",
            "prompt": "prompt text",
            "stream": False,
            "options": {"temperature": 0.1, "num_predict": 1000},
        }

    def test_error_status(self):
        client = _client(lambda request: httpx.Response(503, text="loading model"))
        with pytest.raises(TextGenerationError, match="LLM request failed: 503"):
            _generate(client)

    def test_body_without_response_field(self):
        client = _client(lambda request: httpx.Response(200, json={"done": True}))
        with pytest.raises(TextGenerationError, match="missing the 'response' field"):
            _generate(client)

    def test_non_json_body(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(TextGenerationError, match="not JSON"):
            _generate(client)

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TextGenerationError, match="connection refused"):
            _generate(_client(handler))

    def test_health_check(self):
        assert _client(lambda request: httpx.Response(200, json={"models": []})).health_check() is True
        assert _client(lambda request: httpx.Response(500)).health_check() is False

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert _client(refuse).health_check() is False


def test_build_text_generator_picks_provider(settings):
    assert isinstance(build_text_generator(settings.llm), OllamaClient)

    openai_settings = settings.llm.__class__(
        provider="openai",
        model="gpt-4o-mini",
        base_url="",
        temperature=0.1,
        max_tokens=1000,
        timeout=settings.llm.timeout,
        api_key="sk-test",
    )
    assert isinstance(build_text_generator(openai_settings), OpenAIChatClient)


def test_unconfigured_provider_logs_missing_variables(settings, caplog):
    unconfigured = settings.llm.__class__(
        provider="ollama",
        model="llama3.1:latest",
        base_url="",
        temperature=0.1,
        max_tokens=1000,
        timeout=settings.llm.timeout,
    )

    with caplog.at_level("WARNING", logger="ai_calendar.llm.client"):
        build_text_generator(unconfigured)

    assert "Text generation is not configured; missing OLLAMA_BASE_URL" in caplog.text


def test_configured_provider_logs_nothing(settings, caplog):
    with caplog.at_level("WARNING", logger="ai_calendar.llm.client"):
        build_text_generator(settings.llm)

    assert "not configured" not in caplog.text
