"""Error taxonomy shared by the core, the oracle adapters, and transports.

- :class:`OracleError` is recovered locally: the explorer skips that path.
- :class:`InvalidInputError` is raised at the transport boundary for a
  malformed request and is fatal for that request only.
- :class:`TransportError` reports a failure to talk to an out-of-process
  simplifier; no retry happens at this layer.
"""

from __future__ import annotations


class SimplifyError(Exception):
    """Base class for every error raised by qsol-simplify."""


class OracleError(SimplifyError):
    """The rewrite capability failed or timed out for one diversity level."""

    def __init__(self, message: str, *, diversity_level: int | None = None) -> None:
        super().__init__(message)
        self.diversity_level = diversity_level

    def __str__(self) -> str:
        base = super().__str__()
        if self.diversity_level is None:
            return base
        return f"[level {self.diversity_level}] {base}"


class InvalidInputError(SimplifyError, ValueError):
    """A request could not be understood (missing or mistyped fields)."""


class TransportError(SimplifyError):
    """Communication with an external simplifier process failed."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


__all__ = ["SimplifyError", "OracleError", "InvalidInputError", "TransportError"]
