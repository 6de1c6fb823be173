"""Caller side of the stdio worker.

:class:`SubprocessSimplifier` spawns ``python -m qsol_simplify.transport.worker``
once per call, sends a :class:`SimplifyRequest`, and parses the response.
Every communication failure becomes :class:`TransportError` carrying the
exit code and stderr; a rejected request becomes :class:`InvalidInputError`.
No retry happens here.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Mapping, Sequence

from pydantic import ValidationError

from qsol_simplify.core.contracts.simplification import SimplificationResult
from qsol_simplify.core.errors import InvalidInputError, TransportError
from qsol_simplify.transport.protocol import (
    EXIT_INVALID_INPUT,
    SimplifyRequest,
    SimplifyResponse,
)

WORKER_MODULE = "qsol_simplify.transport.worker"


class SubprocessSimplifier:
    """Run each simplification in a fresh worker process.

    Parameters
    ----------
    python:
        Interpreter used to launch the worker; defaults to ``sys.executable``.
    timeout_seconds:
        Wall-clock limit for one call, spawn to exit.
    env:
        Environment for the child; inherits the parent's when ``None``.
    """

    def __init__(
        self,
        python: str | None = None,
        *,
        timeout_seconds: float = 120.0,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.python = python or sys.executable
        self.timeout_seconds = timeout_seconds
        self.env = dict(env) if env is not None else None

    @property
    def command(self) -> Sequence[str]:
        return [self.python, "-m", WORKER_MODULE]

    def simplify(
        self,
        text: str,
        num_paths: int | None = None,
        target_score: float | None = None,
    ) -> SimplificationResult:
        request = SimplifyRequest(text=text, num_paths=num_paths, target_score=target_score)
        payload = request.model_dump_json(exclude_none=True)

        try:
            completed = subprocess.run(
                list(self.command),
                input=payload,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                env=self.env,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise TransportError(
                f"Simplifier worker timed out after {self.timeout_seconds:.1f}s"
            ) from exc
        except OSError as exc:
            raise TransportError(f"Could not start simplifier worker: {exc}") from exc

        stderr = (completed.stderr or "").strip()
        if completed.returncode == EXIT_INVALID_INPUT:
            raise InvalidInputError(stderr or "Simplifier worker rejected the request")
        if completed.returncode != 0:
            raise TransportError(
                f"Simplifier worker exited with code {completed.returncode}: "
                f"{stderr or 'no diagnostic'}",
                exit_code=completed.returncode,
                stderr=stderr,
            )

        try:
            response = SimplifyResponse.model_validate_json((completed.stdout or "").strip())
        except ValidationError as exc:
            raise TransportError(
                f"Simplifier worker returned an unreadable response: {exc.error_count()} error(s)",
                exit_code=completed.returncode,
                stderr=stderr,
            ) from exc
        return response.to_result()


__all__ = ["SubprocessSimplifier", "WORKER_MODULE"]
