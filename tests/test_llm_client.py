from __future__ import annotations

from typing import Any

import pytest

from qsol_simplify.llm.client import LLMClient, LLMClientError
from qsol_simplify.llm.models import DEFAULT_ALIAS, get_model


def _install_fake_post(monkeypatch: Any, response: dict[str, Any]) -> dict[str, Any]:
    """Patch `LLMClient._post` to record the request and return `response`."""
    captured: dict[str, Any] = {}

    def fake_post(
        self: LLMClient,
        *,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        captured["url"] = url
        captured["headers"] = headers
        captured["payload"] = payload
        return response

    # Patch at the class level (slots-safe).
    monkeypatch.setattr(LLMClient, "_post", fake_post)
    return captured


def test_from_env_reads_openai_api_key_and_base_url(monkeypatch: Any) -> None:
    """LLMClient.from_env() should honour OPENAI_API_KEY and OPENAI_BASE_URL."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-openai-key")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://example.com/v1")

    client = LLMClient.from_env(timeout_seconds=5.0)

    assert client.api_key == "test-openai-key"
    assert client.base_url == "https://example.com/v1"
    assert client.default_model_alias == DEFAULT_ALIAS
    assert client.timeout_seconds == 5.0


def test_generate_openai_compatible_returns_text(monkeypatch: Any) -> None:
    """OpenAI-family providers go through Chat Completions."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    client = LLMClient(api_key="dummy-openai-key", base_url="https://api.example.com/v1")
    captured = _install_fake_post(
        monkeypatch, {"choices": [{"message": {"content": "The cat sat."}}]}
    )

    text = client.generate(
        [{"role": "user", "content": "simplify: The feline was seated."}],
        temperature=0.5,
    )

    assert text == "The cat sat."
    assert captured["url"] == "https://api.example.com/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer dummy-openai-key"
    assert captured["payload"]["model"] == get_model("simplifier").name
    assert captured["payload"]["temperature"] == 0.5
    assert captured["payload"]["max_tokens"] == get_model("simplifier").max_tokens


def test_generate_gemini_uses_google_key_and_system_instruction(monkeypatch: Any) -> None:
    """Gemini requests carry the key header and move system text aside."""
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")
    monkeypatch.delenv("GOOGLE_API_BASE_URL", raising=False)
    client = LLMClient(api_key="", base_url="https://unused.example.com")
    captured = _install_fake_post(
        monkeypatch,
        {"candidates": [{"content": {"parts": [{"text": "Short "}, {"text": "text."}]}}]},
    )

    text = client.generate(
        [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "simplify: Elongated prose."},
        ],
        model="gemini",
    )

    assert text == "Short text."
    assert captured["url"].endswith(f"/models/{get_model('gemini').name}:generateContent")
    assert captured["headers"]["x-goog-api-key"] == "test-google-key"
    assert captured["payload"]["systemInstruction"] == {"parts": [{"text": "Be brief."}]}
    assert captured["payload"]["contents"] == [
        {"role": "user", "parts": [{"text": "simplify: Elongated prose."}]}
    ]


def test_local_provider_needs_no_key(monkeypatch: Any) -> None:
    monkeypatch.delenv("OLLAMA_BASE_URL", raising=False)
    monkeypatch.delenv("OLLAMA_API_KEY", raising=False)
    client = LLMClient(api_key="", base_url="https://api.openai.com/v1")
    captured = _install_fake_post(monkeypatch, {"choices": [{"message": {"content": "ok"}}]})

    assert client.has_credentials("local")
    assert client.generate([{"role": "user", "content": "hi"}], model="local") == "ok"
    assert "Authorization" not in captured["headers"]
    assert captured["url"] == "http://localhost:11434/v1/chat/completions"


def test_missing_key_raises_client_error(monkeypatch: Any) -> None:
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    client = LLMClient(api_key="", base_url="https://api.openai.com/v1")

    assert not client.has_credentials("deepseek")
    with pytest.raises(LLMClientError, match="DEEPSEEK_API_KEY"):
        client.generate([{"role": "user", "content": "hi"}], model="deepseek")


@pytest.mark.parametrize(  # type: ignore[misc]
    "response",
    [
        {},
        {"choices": []},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"content": None}}]},
    ],
)
def test_malformed_openai_response_raises(monkeypatch: Any, response: dict[str, Any]) -> None:
    client = LLMClient(api_key="key", base_url="https://api.example.com/v1")
    _install_fake_post(monkeypatch, response)
    with pytest.raises(LLMClientError):
        client.generate([{"role": "user", "content": "hi"}])


def test_unknown_model_is_treated_as_openai_id() -> None:
    config = get_model("gpt-4.1-mini")
    assert config.name == "gpt-4.1-mini"
    assert config.provider == "openai"
