# -----------------------------------------------------------------------------
# Synchronous chat-completion client used by the LLM rewrite backend.
#
#   - reads provider API keys / base URLs from environment variables
#   - resolves model aliases through the registry in `models.py`
#   - exposes a single `generate()` method returning one text completion
#
# Only the standard library (`urllib.request`) is used for HTTP. Unit tests
# patch the `_post()` seam so no real network calls happen.
#
# Provider families
# -----------------
# 1. OpenAI-compatible Chat Completions (POST /chat/completions):
#    openai, deepseek, groq, ollama (local, no key required)
# 2. Google Gemini generateContent (POST /models/{model}:generateContent):
#    google
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any

from .models import DEFAULT_ALIAS, ModelConfig, get_model

_API_KEY_ENV: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "groq": "GROQ_API_KEY",
    "google": "GOOGLE_API_KEY",
    "ollama": "OLLAMA_API_KEY",
}
_BASE_URL_ENV: dict[str, str] = {
    "openai": "OPENAI_BASE_URL",
    "deepseek": "DEEPSEEK_BASE_URL",
    "groq": "GROQ_BASE_URL",
    "ollama": "OLLAMA_BASE_URL",
    "google": "GOOGLE_API_BASE_URL",
}
# Providers that accept unauthenticated requests.
_KEYLESS_PROVIDERS = frozenset({"ollama"})


class LLMClientError(RuntimeError):
    """Raised when a completion cannot be obtained or parsed."""


@dataclass(slots=True)
class LLMClient:
    """Minimal multi-provider chat client.

    Parameters
    ----------
    api_key:
        Default OpenAI API key; other providers read their own variables
        lazily inside :meth:`generate`.
    base_url:
        Default base URL for OpenAI endpoints.
    default_model_alias:
        Registry alias used when :meth:`generate` gets no ``model``.
    timeout_seconds:
        Socket timeout for each HTTP request.
    """

    api_key: str
    base_url: str
    default_model_alias: str = DEFAULT_ALIAS
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(
        cls,
        default_model_alias: str = DEFAULT_ALIAS,
        *,
        timeout_seconds: float = 30.0,
    ) -> LLMClient:
        """Build a client from ``OPENAI_API_KEY`` / ``OPENAI_BASE_URL``."""
        return cls(
            api_key=os.getenv("OPENAI_API_KEY", ""),
            base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            default_model_alias=default_model_alias,
            timeout_seconds=timeout_seconds,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def has_credentials(self, model: str | None = None) -> bool:
        """Return True if a request for ``model`` would carry an API key."""
        config = get_model(model or self.default_model_alias)
        provider = config.provider.lower().strip()
        if provider in _KEYLESS_PROVIDERS:
            return True
        return bool(self._resolve_api_key(provider))

    def generate(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str:
        """Return the first completion for ``messages``.

        Raises
        ------
        LLMClientError
            On missing credentials, HTTP or network failure, timeout, or a
            response without text content.
        """
        config: ModelConfig = get_model(model or self.default_model_alias)
        effective_max_tokens = int(max_tokens if max_tokens is not None else config.max_tokens)
        provider = config.provider.lower().strip()

        if provider == "google":
            response = self._generate_gemini(
                config=config,
                messages=messages,
                temperature=temperature,
                max_tokens=effective_max_tokens,
            )
            return self._extract_content_gemini(response)

        response = self._generate_openai_compatible(
            config=config,
            messages=messages,
            temperature=temperature,
            max_tokens=effective_max_tokens,
        )
        return self._extract_content_openai(response)

    # ------------------------------------------------------------------ #
    # Provider-specific helpers
    # ------------------------------------------------------------------ #
    def _resolve_api_key(self, provider: str) -> str:
        env_name = _API_KEY_ENV.get(provider, "OPENAI_API_KEY")
        api_key = os.getenv(env_name, "")
        if not api_key and provider == "openai":
            api_key = self.api_key
        return api_key

    def _resolve_base_url(self, provider: str, config: ModelConfig) -> str:
        env_name = _BASE_URL_ENV.get(provider, "OPENAI_BASE_URL")
        # The client-level URL only applies to OpenAI itself.
        client_url = self.base_url if provider == "openai" else ""
        base_url = os.getenv(env_name) or client_url or config.base_url
        return base_url.rstrip("/")

    def _generate_openai_compatible(
        self,
        *,
        config: ModelConfig,
        messages: Sequence[Mapping[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        """POST to ``{base_url}/chat/completions``."""
        provider = config.provider.lower().strip()
        api_key = self._resolve_api_key(provider)
        if not api_key and provider not in _KEYLESS_PROVIDERS:
            raise LLMClientError(
                f"Missing API key for provider '{provider}'. "
                f"Expected environment variable '{_API_KEY_ENV.get(provider, 'OPENAI_API_KEY')}'."
            )

        url = self._resolve_base_url(provider, config) + "/chat/completions"
        payload: MutableMapping[str, Any] = {
            "model": config.name,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        return self._post(url=url, headers=headers, payload=payload)

    def _generate_gemini(
        self,
        *,
        config: ModelConfig,
        messages: Sequence[Mapping[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        """POST to ``{base_url}/models/{model}:generateContent``.

        Gemini has no ``system`` role in ``contents``; system messages are
        sent as ``systemInstruction`` instead.
        """
        api_key = self._resolve_api_key("google")
        if not api_key:
            raise LLMClientError("Missing GOOGLE_API_KEY; cannot call Google Gemini models.")

        url = f"{self._resolve_base_url('google', config)}/models/{config.name}:generateContent"

        system_parts = [{"text": m["content"]} for m in messages if m["role"] == "system"]
        contents = [
            {
                "role": "model" if m["role"] == "assistant" else "user",
                "parts": [{"text": m["content"]}],
            }
            for m in messages
            if m["role"] != "system"
        ]
        payload: MutableMapping[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}

        headers: dict[str, str] = {
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        }
        return self._post(url=url, headers=headers, payload=payload)

    # ------------------------------------------------------------------ #
    # Internal helpers (test seams)
    # ------------------------------------------------------------------ #
    def _post(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Perform an HTTP POST and decode the JSON response body."""
        body = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(url=url, data=body, headers=dict(headers), method="POST")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise LLMClientError(
                f"LLM HTTP error {exc.code}: {exc.reason}; body={detail!r}"
            ) from exc
        except urllib.error.URLError as exc:
            raise LLMClientError(f"LLM network error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMClientError(f"LLM request timed out after {self.timeout_seconds:.1f}s") from exc

        try:
            decoded: dict[str, Any] = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise LLMClientError("Failed to decode LLM response as JSON") from exc

        return decoded

    # ------------------------------------------------------------------ #
    # Response extraction helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _extract_content_openai(response: Mapping[str, Any]) -> str:
        """Extract ``choices[0].message.content`` from a Chat Completions payload."""
        choices = response.get("choices")
        if not isinstance(choices, list) or not choices:
            raise LLMClientError("LLM response has no choices; cannot extract content.")

        message = choices[0].get("message") if isinstance(choices[0], Mapping) else None
        if not isinstance(message, Mapping):
            raise LLMClientError("LLM response choice[0].message is missing or invalid.")

        content = message.get("content")
        if not isinstance(content, str):
            raise LLMClientError("LLM response choice[0].message.content is not text.")
        return content

    @staticmethod
    def _extract_content_gemini(response: Mapping[str, Any]) -> str:
        """Concatenate the text parts of ``candidates[0].content``."""
        candidates = response.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise LLMClientError("Gemini response has no candidates; cannot extract content.")

        content = candidates[0].get("content") if isinstance(candidates[0], Mapping) else None
        if not isinstance(content, Mapping):
            raise LLMClientError("Gemini response candidates[0].content is missing or invalid.")

        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            raise LLMClientError("Gemini response candidates[0].content.parts is empty.")

        texts = [
            part["text"]
            for part in parts
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        ]
        if not texts:
            raise LLMClientError("Gemini response parts contain no text fields.")
        return "".join(texts)


__all__ = ["LLMClient", "LLMClientError"]
