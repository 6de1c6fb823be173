from __future__ import annotations

from .client import LLMClient, LLMClientError
from .lexical import LexicalRewriteBackend
from .models import (
    DEFAULT_ALIAS,
    MODEL_REGISTRY,
    ModelConfig,
    all_models,
    get_model,
)
from .oracle import (
    MIN_CANDIDATE_CHARS,
    LLMRewriteBackend,
    RewriteBackend,
    RewriteOracle,
    build_oracle,
    clean_candidate,
)

__all__ = [
    "ModelConfig",
    "MODEL_REGISTRY",
    "DEFAULT_ALIAS",
    "get_model",
    "all_models",
    "LLMClient",
    "LLMClientError",
    "LexicalRewriteBackend",
    "LLMRewriteBackend",
    "MIN_CANDIDATE_CHARS",
    "RewriteBackend",
    "RewriteOracle",
    "build_oracle",
    "clean_candidate",
]
