"""Rewrite oracle adapter.

The core only needs ``generate(text, diversity_level) -> str | None``.
:class:`RewriteOracle` provides that on top of any *backend*: either an
object with ``rewrite(text, diversity_level) -> str`` or a plain callable
with the same signature. The adapter:

1. forwards the call and converts any backend failure into
   :class:`OracleError` tagged with the diversity level;
2. strips a leading ``simplify:`` prompt echo and surrounding whitespace;
3. returns ``None`` for empty or too-short rewrites (under 10 characters).

:func:`build_oracle` picks a backend from settings: the LLM backend when
credentials are available, the offline lexical backend otherwise.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from qsol_simplify.core.errors import OracleError
from qsol_simplify.core.settings import OracleKind, Settings, get_logger, load_settings

from .client import LLMClient
from .lexical import LexicalRewriteBackend

logger = get_logger("qsol_simplify.oracle")

#: Rewrites shorter than this (after cleaning) are rejected as degenerate.
MIN_CANDIDATE_CHARS = 10

_PROMPT_ECHO_RE = re.compile(r"^simplify:\s*")

SYSTEM_PROMPT = (
    "You rewrite text so that it is easier to read. Use short sentences and "
    "common words. Keep every fact and do not add new ones. Reply with the "
    "rewritten text only."
)

RewriteFn = Callable[[str, int], str | None]


@runtime_checkable
class RewriteBackend(Protocol):
    """Raw rewrite capability wrapped by :class:`RewriteOracle`."""

    def rewrite(self, text: str, diversity_level: int) -> str | None: ...


def clean_candidate(raw: str, *, min_chars: int = MIN_CANDIDATE_CHARS) -> str | None:
    """Strip the prompt echo and whitespace; reject short or empty output."""
    cleaned = _PROMPT_ECHO_RE.sub("", raw.lstrip(), count=1).strip()
    if not cleaned or len(cleaned) < min_chars:
        return None
    return cleaned


class RewriteOracle:
    """Adapter that turns a rewrite backend into the explorer's oracle."""

    def __init__(
        self,
        backend: RewriteBackend | RewriteFn,
        *,
        min_chars: int = MIN_CANDIDATE_CHARS,
        name: str | None = None,
    ) -> None:
        if isinstance(backend, RewriteBackend):
            self._rewrite: RewriteFn = backend.rewrite
        elif callable(backend):
            self._rewrite = backend
        else:
            raise TypeError(f"backend must be callable or define rewrite(), got {backend!r}")
        self.min_chars = min_chars
        self.name = name or type(backend).__name__

    def __repr__(self) -> str:
        return f"RewriteOracle(name={self.name!r})"

    def generate(self, text: str, diversity_level: int) -> str | None:
        """Return a cleaned rewrite of ``text``, or ``None`` if it is unusable.

        Raises
        ------
        ValueError
            If ``diversity_level`` is below 1.
        OracleError
            If the backend fails or returns something other than text.
        """
        if diversity_level < 1:
            raise ValueError(f"diversity_level must be >= 1, got {diversity_level}")

        try:
            raw = self._rewrite(text, diversity_level)
        except OracleError as exc:
            if exc.diversity_level is not None:
                raise
            raise OracleError(str(exc), diversity_level=diversity_level) from exc
        except Exception as exc:
            raise OracleError(
                f"{self.name} failed: {exc}", diversity_level=diversity_level
            ) from exc

        if raw is None:
            return None
        if not isinstance(raw, str):
            raise OracleError(
                f"{self.name} returned {type(raw).__name__}, expected str",
                diversity_level=diversity_level,
            )
        return clean_candidate(raw, min_chars=self.min_chars)


@dataclass(slots=True)
class LLMRewriteBackend:
    """Rewrite backend backed by a chat-completion model.

    The diversity level is mapped to sampling temperature:
    ``min(base_temperature + temperature_step * (level - 1), max_temperature)``.
    """

    client: LLMClient
    model: str | None = None
    base_temperature: float = 0.3
    temperature_step: float = 0.2
    max_temperature: float = 1.2
    max_input_chars: int = 2048

    def temperature_for(self, diversity_level: int) -> float:
        raw = self.base_temperature + self.temperature_step * (diversity_level - 1)
        return min(raw, self.max_temperature)

    def build_messages(self, text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"simplify: {text[: self.max_input_chars]}"},
        ]

    def rewrite(self, text: str, diversity_level: int) -> str:
        return self.client.generate(
            self.build_messages(text),
            model=self.model,
            temperature=self.temperature_for(diversity_level),
        )


def build_oracle(
    kind: OracleKind | str | None = None,
    *,
    model: str | None = None,
    settings: Settings | None = None,
) -> RewriteOracle:
    """Construct the configured oracle.

    Parameters
    ----------
    kind:
        ``"llm"``, ``"lexical"``, or ``"auto"``; defaults to
        ``settings.oracle_backend``.
    model:
        Model alias for the LLM backend; defaults to ``settings.oracle_model``.
    settings:
        Explicit settings object; defaults to :func:`load_settings`.
    """
    cfg = settings or load_settings()
    resolved = OracleKind(kind) if kind is not None else cfg.oracle_backend
    model_alias = model or cfg.oracle_model

    client = LLMClient.from_env(model_alias, timeout_seconds=cfg.oracle_timeout_seconds)
    if not client.api_key and cfg.openai_api_key:
        client.api_key = cfg.openai_api_key

    if resolved is OracleKind.AUTO:
        resolved = OracleKind.LLM if client.has_credentials() else OracleKind.LEXICAL
        logger.debug("Oracle backend resolved to %s", resolved.value)

    if resolved is OracleKind.LEXICAL:
        return RewriteOracle(LexicalRewriteBackend(), name="lexical")

    backend = LLMRewriteBackend(
        client=client,
        model=model_alias,
        base_temperature=cfg.oracle_base_temperature,
        temperature_step=cfg.oracle_temperature_step,
        max_temperature=cfg.oracle_max_temperature,
        max_input_chars=cfg.max_input_chars,
    )
    return RewriteOracle(backend, name=f"llm:{model_alias}")


__all__ = [
    "MIN_CANDIDATE_CHARS",
    "RewriteBackend",
    "RewriteFn",
    "RewriteOracle",
    "LLMRewriteBackend",
    "clean_candidate",
    "build_oracle",
]
