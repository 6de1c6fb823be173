"""
Simplification pipeline: score, explore, select.

Flow Overview
-------------
``INITIAL``
    Score the input. If it already meets ``target_score`` the run ends in
    ``ALREADY_SIMPLE`` and the text is returned unchanged.
``EXPLORING``
    Ask the oracle for one rewrite per diversity level ``1..num_paths``
    and score every valid rewrite.
``NO_CANDIDATES``
    Every path failed or came back empty: fall back to the original text.
``SELECTING`` → ``DONE``
    The phi-spiral gate picks one candidate; its text and raw score form
    the result.

Blank input (empty after trimming) skips exploration and ends in
``NO_CANDIDATES`` with a score of 0.0, so no oracle call is spent on it.

Observers
---------
Callers may pass an ``observer`` callable. It receives an immutable
:class:`SimplifyEvent` on each state transition. Observers are a side
channel: an exception raised inside one is logged and ignored.
:class:`TraceRecorder` is a ready-made observer that keeps every event.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from qsol_simplify.core.contracts.simplification import SimplificationResult
from qsol_simplify.core.evals.readability import flesch_reading_ease
from qsol_simplify.core.explorer import Oracle, Scorer, explore
from qsol_simplify.core.selection import select
from qsol_simplify.core.settings import get_logger
from qsol_simplify.llm.oracle import build_oracle

logger = get_logger("qsol_simplify.pipeline")

DEFAULT_NUM_PATHS = 3
DEFAULT_TARGET_SCORE = 80.0


class SimplifyState(str, Enum):
    """States of a single simplification run."""

    INITIAL = "initial"
    ALREADY_SIMPLE = "already_simple"
    EXPLORING = "exploring"
    NO_CANDIDATES = "no_candidates"
    SELECTING = "selecting"
    DONE = "done"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {SimplifyState.ALREADY_SIMPLE, SimplifyState.NO_CANDIDATES, SimplifyState.DONE}
)


@dataclass(frozen=True, slots=True)
class SimplifyEvent:
    """
    Immutable record of one state transition.

    Attributes
    ----------
    state : SimplifyState
        The state just entered.
    timestamp : str
        ISO-8601 UTC time of the transition.
    note : str | None
        Short human-readable label for CLI traces.
    data : dict[str, Any]
        JSON-safe details (scores, candidate counts).
    """

    state: SimplifyState
    timestamp: str
    note: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


Observer = Callable[[SimplifyEvent], None]


class TraceRecorder:
    """Observer that keeps every :class:`SimplifyEvent` in arrival order."""

    def __init__(self) -> None:
        self.events: list[SimplifyEvent] = []

    def __call__(self, event: SimplifyEvent) -> None:
        self.events.append(event)

    def states(self) -> list[SimplifyState]:
        return [event.state for event in self.events]


class Simplifier:
    """Stateless orchestrator with an injected rewrite oracle.

    Parameters
    ----------
    oracle:
        Rewrite oracle (see :class:`qsol_simplify.llm.oracle.RewriteOracle`).
        When ``None``, one is built from settings on first use.
    scorer:
        Readability function; Flesch reading ease by default.
    max_workers:
        Explorer thread count (``1`` = sequential).
    path_timeout:
        Per-path wait limit on the explorer's thread pool, in seconds.
    observer:
        Default observer notified on every state transition.
    """

    def __init__(
        self,
        oracle: Oracle | None = None,
        *,
        scorer: Scorer = flesch_reading_ease,
        max_workers: int = 1,
        path_timeout: float | None = None,
        observer: Observer | None = None,
    ) -> None:
        self._oracle = oracle
        self.scorer = scorer
        self.max_workers = max_workers
        self.path_timeout = path_timeout
        self.observer = observer

    @property
    def oracle(self) -> Oracle:
        if self._oracle is None:
            self._oracle = build_oracle()
        return self._oracle

    def _notify(
        self,
        observer: Observer | None,
        state: SimplifyState,
        note: str | None = None,
        **data: Any,
    ) -> None:
        logger.debug("State -> %s %s", state.value, data or "")
        if observer is None:
            return
        event = SimplifyEvent(
            state=state,
            timestamp=datetime.now(UTC).isoformat(),
            note=note,
            data=data,
        )
        try:
            observer(event)
        except Exception:
            logger.exception("Observer failed on %s; ignoring", state.value)

    def simplify(
        self,
        text: str,
        num_paths: int = DEFAULT_NUM_PATHS,
        target_score: float = DEFAULT_TARGET_SCORE,
        *,
        observer: Observer | None = None,
    ) -> SimplificationResult:
        """Simplify ``text`` until it reads at ``target_score`` or better.

        Returns
        -------
        SimplificationResult
            The selected rewrite with its raw score and the number of valid
            candidates, or the original text with ``paths_explored == 0``.
        """
        if num_paths < 1:
            raise ValueError(f"num_paths must be >= 1, got {num_paths}")

        observer = observer or self.observer
        score = self.scorer(text)
        self._notify(observer, SimplifyState.INITIAL, "scored input", score=score)

        if score >= target_score:
            self._notify(
                observer,
                SimplifyState.ALREADY_SIMPLE,
                "input already meets target",
                score=score,
                target_score=target_score,
            )
            logger.info("Input scores %.2f >= %.2f; returning unchanged", score, target_score)
            return SimplificationResult(
                original=text, simplified=text, score=score, paths_explored=0
            )

        if not text.strip():
            self._notify(observer, SimplifyState.NO_CANDIDATES, "blank input", score=score)
            return SimplificationResult(
                original=text, simplified=text, score=score, paths_explored=0
            )

        self._notify(observer, SimplifyState.EXPLORING, "exploring paths", num_paths=num_paths)
        candidates = explore(
            text,
            num_paths,
            oracle=self.oracle,
            scorer=self.scorer,
            max_workers=self.max_workers,
            path_timeout=self.path_timeout,
        )

        if not candidates:
            self._notify(
                observer, SimplifyState.NO_CANDIDATES, "no valid candidates", score=score
            )
            logger.info("No candidates from %d paths; returning original text", num_paths)
            return SimplificationResult(
                original=text, simplified=text, score=score, paths_explored=0
            )

        self._notify(
            observer,
            SimplifyState.SELECTING,
            "selecting candidate",
            raw_scores=[candidate.raw_score for candidate in candidates],
        )
        best = select(candidates)
        if best is None:
            raise RuntimeError("selector returned no candidate from a non-empty list")

        self._notify(
            observer,
            SimplifyState.DONE,
            "selected candidate",
            score=best.raw_score,
            diversity_level=best.diversity_level,
            paths_explored=len(candidates),
        )
        logger.info(
            "Selected level %s candidate: %.2f -> %.2f (%d paths)",
            best.diversity_level,
            score,
            best.raw_score,
            len(candidates),
        )
        return SimplificationResult(
            original=text,
            simplified=best.simplified_text,
            score=best.raw_score,
            paths_explored=len(candidates),
        )


def simplify(
    text: str,
    num_paths: int = DEFAULT_NUM_PATHS,
    target_score: float = DEFAULT_TARGET_SCORE,
    *,
    oracle: Oracle | None = None,
    observer: Observer | None = None,
    scorer: Scorer = flesch_reading_ease,
    max_workers: int = 1,
    path_timeout: float | None = None,
) -> SimplificationResult:
    """Functional entry point; see :meth:`Simplifier.simplify`."""
    simplifier = Simplifier(
        oracle,
        scorer=scorer,
        max_workers=max_workers,
        path_timeout=path_timeout,
    )
    return simplifier.simplify(text, num_paths, target_score, observer=observer)


__all__ = [
    "DEFAULT_NUM_PATHS",
    "DEFAULT_TARGET_SCORE",
    "SimplifyState",
    "SimplifyEvent",
    "Observer",
    "TraceRecorder",
    "Simplifier",
    "simplify",
]
