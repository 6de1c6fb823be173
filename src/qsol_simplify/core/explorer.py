"""Candidate exploration across diversity levels.

The explorer asks the rewrite oracle for one rewrite per diversity level
``1..num_paths`` and scores each valid rewrite. A path whose oracle call
fails (:class:`OracleError`) or yields nothing is skipped and logged; the
remaining paths still run. Exploration never stops early.

Paths are independent, so they may run on a thread pool. Results are
keyed by diversity level and returned in generation order either way,
because the selector's decay depends on that order.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from time import monotonic
from typing import Protocol

from qsol_simplify.core.contracts.candidate import Candidate
from qsol_simplify.core.errors import OracleError
from qsol_simplify.core.evals.readability import flesch_reading_ease
from qsol_simplify.core.settings import get_logger

logger = get_logger("qsol_simplify.explorer")

Scorer = Callable[[str], float]


class Oracle(Protocol):
    """Anything that can turn ``(text, diversity_level)`` into a rewrite."""

    def generate(self, text: str, diversity_level: int) -> str | None: ...


def _run_path(oracle: Oracle, text: str, level: int) -> str | None:
    """Call the oracle for one level, mapping stray exceptions to OracleError."""
    try:
        return oracle.generate(text, level)
    except OracleError:
        raise
    except Exception as exc:
        raise OracleError(f"oracle raised {type(exc).__name__}: {exc}", diversity_level=level) from exc


def _collect_sequential(oracle: Oracle, text: str, num_paths: int) -> dict[int, str | None]:
    outputs: dict[int, str | None] = {}
    for level in range(1, num_paths + 1):
        try:
            outputs[level] = _run_path(oracle, text, level)
        except OracleError as exc:
            logger.warning("Skipping path %d: %s", level, exc)
            outputs[level] = None
    return outputs


def _collect_parallel(
    oracle: Oracle,
    text: str,
    num_paths: int,
    max_workers: int,
    path_timeout: float | None,
) -> dict[int, str | None]:
    outputs: dict[int, str | None] = {}
    # Timed runs start every path at once; each deadline counts from submission.
    workers = num_paths if path_timeout is not None else min(max_workers, num_paths)
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="qsol-path")
    try:
        started = monotonic()
        futures: dict[int, Future[str | None]] = {
            level: executor.submit(_run_path, oracle, text, level)
            for level in range(1, num_paths + 1)
        }
        for level, future in futures.items():
            remaining = None
            if path_timeout is not None:
                remaining = max(0.0, started + path_timeout - monotonic())
            try:
                outputs[level] = future.result(timeout=remaining)
            except FutureTimeoutError:
                exc = OracleError(
                    f"timed out after {path_timeout:.1f}s", diversity_level=level
                )
                logger.warning("Skipping path %d: %s", level, exc)
                outputs[level] = None
            except OracleError as exc:
                logger.warning("Skipping path %d: %s", level, exc)
                outputs[level] = None
    finally:
        # In-flight oracle calls are not cancelled; timed-out paths finish in the background.
        executor.shutdown(wait=False, cancel_futures=True)
    return outputs


def explore(
    text: str,
    num_paths: int,
    *,
    oracle: Oracle,
    scorer: Scorer = flesch_reading_ease,
    max_workers: int = 1,
    path_timeout: float | None = None,
) -> list[Candidate]:
    """Generate and score up to ``num_paths`` candidate rewrites.

    Parameters
    ----------
    text:
        The text to simplify.
    num_paths:
        Number of diversity levels to try (``>= 1``).
    oracle:
        Rewrite capability; ``generate`` returns a cleaned rewrite or ``None``.
    scorer:
        Readability function used for each candidate.
    max_workers:
        Thread count. ``1`` with no ``path_timeout`` runs in the calling thread.
        Ignored when ``path_timeout`` is set.
    path_timeout:
        Seconds each path may run. Every path then gets its own thread and
        starts immediately; a timeout skips that path only.

    Returns
    -------
    list[Candidate]
        Valid candidates ordered by diversity level; empty if every path was
        skipped.
    """
    if num_paths < 1:
        raise ValueError(f"num_paths must be >= 1, got {num_paths}")
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    if max_workers == 1 and path_timeout is None:
        outputs = _collect_sequential(oracle, text, num_paths)
    else:
        outputs = _collect_parallel(
            oracle, text, num_paths, max_workers, path_timeout
        )

    candidates: list[Candidate] = []
    for level in sorted(outputs):
        rewrite = outputs[level]
        if rewrite is None:
            logger.debug("Path %d produced no candidate", level)
            continue
        score = scorer(rewrite)
        logger.debug("Path %d candidate scored %.2f", level, score)
        candidates.append(
            Candidate(simplified_text=rewrite, raw_score=score, diversity_level=level)
        )
    return candidates


__all__ = ["Oracle", "Scorer", "explore"]
