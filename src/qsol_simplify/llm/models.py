# -----------------------------------------------------------------------------
# This module defines the small, in-process model registry used by the LLM
# rewrite backend. Aliases let the CLI, the API, and `.env` files say
# "simplifier" or "gemini" instead of pinning provider model IDs.
#
# Each entry carries:
#   - the concrete provider model ID
#   - the provider family (drives endpoint and authentication selection)
#   - a default base URL
#   - a soft `max_tokens` cap for one rewrite
#
# Sampling temperature is not stored here: the rewrite backend derives it
# from the diversity level of each exploration path.
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Configuration for a single rewrite model.

    Parameters
    ----------
    name:
        Provider-specific model identifier, e.g. ``"gpt-4o-mini"``.
    provider:
        Logical provider name: ``"openai"``, ``"deepseek"``, ``"groq"``,
        ``"ollama"`` (all OpenAI-compatible) or ``"google"`` (Gemini).
    base_url:
        Default base URL; per-provider environment variables override it.
    max_tokens:
        Upper bound on the length of one rewrite.
    """

    name: str
    provider: str = "openai"
    base_url: str = "https://api.openai.com/v1"
    max_tokens: int = 512


MODEL_REGISTRY: dict[str, ModelConfig] = {
    # Default rewrite model: cheap, fast, and good at plain-language edits.
    "simplifier": ModelConfig(
        name="gpt-4o-mini",
        provider="openai",
        base_url="https://api.openai.com/v1",
        max_tokens=512,
    ),
    "fast": ModelConfig(
        name="gpt-4o-mini",
        provider="openai",
        base_url="https://api.openai.com/v1",
        max_tokens=256,
    ),
    "balanced": ModelConfig(
        name="gpt-4o",
        provider="openai",
        base_url="https://api.openai.com/v1",
        max_tokens=1024,
    ),
    "deepseek": ModelConfig(
        name="deepseek-chat",
        provider="deepseek",
        base_url="https://api.deepseek.com/v1",
        max_tokens=1024,
    ),
    "gemini": ModelConfig(
        name="gemini-2.0-flash",
        provider="google",
        base_url="https://generativelanguage.googleapis.com/v1beta",
        max_tokens=1024,
    ),
    # Local OpenAI-compatible server; no API key needed.
    "local": ModelConfig(
        name="llama3.1",
        provider="ollama",
        base_url="http://localhost:11434/v1",
        max_tokens=512,
    ),
}

#: Default logical alias used when callers do not explicitly choose a model.
DEFAULT_ALIAS: str = "simplifier"


def get_model(alias_or_name: str) -> ModelConfig:
    """Return a :class:`ModelConfig` for the given alias or model name.

    Unknown names are treated as concrete OpenAI model IDs, so callers can
    pass ``"gpt-4.1-mini"`` without registering it first.
    """
    if alias_or_name in MODEL_REGISTRY:
        return MODEL_REGISTRY[alias_or_name]
    return ModelConfig(name=alias_or_name)


def all_models() -> Mapping[str, ModelConfig]:
    """Return a shallow copy of the registry."""
    return dict(MODEL_REGISTRY)


__all__ = ["ModelConfig", "MODEL_REGISTRY", "DEFAULT_ALIAS", "get_model", "all_models"]
