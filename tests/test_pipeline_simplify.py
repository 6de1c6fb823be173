"""Tests for the score → explore → select pipeline.

Covers the four canonical scenarios:
1. blank input,
2. input that already meets the target,
3. every path failing,
4. decay-weighted selection among several candidates,
plus idempotence, observers, and the functional entry point.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from qsol_simplify.core.errors import OracleError
from qsol_simplify.core.evals.readability import flesch_reading_ease
from qsol_simplify.pipelines.simplification import (
    Simplifier,
    SimplifyEvent,
    SimplifyState,
    TraceRecorder,
    simplify,
)

COMPLEX_TEXT = (
    "The implementation of comprehensive organizational methodologies "
    "necessitates considerable deliberation among interdisciplinary stakeholders."
)
PLAIN_REWRITE = "The cat sat on the mat. It was warm."


class RecordingOracle:
    """Returns a scripted rewrite per level and records every call."""

    def __init__(
        self, outputs: Mapping[int, object] | None = None, default: object = None
    ) -> None:
        self.outputs = dict(outputs or {})
        self.default = default
        self.calls: list[int] = []

    def generate(self, text: str, diversity_level: int) -> str | None:
        self.calls.append(diversity_level)
        outcome = self.outputs.get(diversity_level, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome  # type: ignore[return-value]


def test_blank_input_returns_zero_score_without_oracle_calls() -> None:
    oracle = RecordingOracle(default=PLAIN_REWRITE)

    result = simplify("", 3, 80.0, oracle=oracle)

    assert (result.original, result.simplified, result.score, result.paths_explored) == (
        "",
        "",
        0.0,
        0,
    )
    assert oracle.calls == []


def test_already_simple_input_is_returned_unchanged() -> None:
    oracle = RecordingOracle(default=PLAIN_REWRITE)

    result = simplify("The cat sat.", 3, 80.0, oracle=oracle)

    assert result.simplified == "The cat sat."
    assert result.original == "The cat sat."
    assert result.paths_explored == 0
    assert result.score == pytest.approx(119.19, abs=0.01)
    assert oracle.calls == []


def test_all_paths_failing_falls_back_to_original() -> None:
    oracle = RecordingOracle({1: None, 2: OracleError("boom"), 3: RuntimeError("down")})

    result = simplify(COMPLEX_TEXT, 3, 80.0, oracle=oracle)

    assert result.simplified == COMPLEX_TEXT
    assert result.paths_explored == 0
    assert result.score == pytest.approx(flesch_reading_ease(COMPLEX_TEXT))
    assert oracle.calls == [1, 2, 3]


def test_decay_prefers_first_candidate_over_higher_later_ones() -> None:
    """Raw scores [70, 90, 85] decay to about [70, 55.6, 32.5]."""
    scores = {"source": 10.0, "rewrite one": 70.0, "rewrite two": 90.0, "rewrite three": 85.0}
    oracle = RecordingOracle({1: "rewrite one", 2: "rewrite two", 3: "rewrite three"})

    result = simplify("source", 3, 80.0, oracle=oracle, scorer=scores.__getitem__)

    assert result.simplified == "rewrite one"
    assert result.score == 70.0
    assert result.paths_explored == 3
    assert result.original == "source"


def test_paths_explored_counts_only_valid_candidates() -> None:
    oracle = RecordingOracle({1: OracleError("boom"), 2: PLAIN_REWRITE, 3: None})

    result = simplify(COMPLEX_TEXT, 3, 80.0, oracle=oracle)

    assert result.paths_explored == 1
    assert result.simplified == PLAIN_REWRITE
    assert result.score == pytest.approx(flesch_reading_ease(PLAIN_REWRITE))


def test_simplifying_a_result_again_is_a_no_op() -> None:
    oracle = RecordingOracle(default=PLAIN_REWRITE)

    first = simplify(COMPLEX_TEXT, 3, 80.0, oracle=oracle)
    assert first.score >= 80.0

    second = simplify(first.simplified, 3, 80.0, oracle=oracle)
    assert second.simplified == first.simplified
    assert second.paths_explored == 0
    assert oracle.calls == [1, 2, 3]


def test_num_paths_must_be_positive() -> None:
    with pytest.raises(ValueError):
        simplify(COMPLEX_TEXT, 0, 80.0, oracle=RecordingOracle())


def test_parallel_simplifier_matches_sequential() -> None:
    outputs = {1: PLAIN_REWRITE, 2: "A much shorter text.", 3: OracleError("nope")}
    sequential = Simplifier(RecordingOracle(outputs)).simplify(COMPLEX_TEXT, 3, 80.0)
    parallel = Simplifier(RecordingOracle(outputs), max_workers=3).simplify(
        COMPLEX_TEXT, 3, 80.0
    )
    assert sequential == parallel


# --------------------------------------------------------------------------- #
# Observers
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(  # type: ignore[misc]
    ("text", "oracle", "expected"),
    [
        (
            COMPLEX_TEXT,
            RecordingOracle(default=PLAIN_REWRITE),
            [
                SimplifyState.INITIAL,
                SimplifyState.EXPLORING,
                SimplifyState.SELECTING,
                SimplifyState.DONE,
            ],
        ),
        (
            "The cat sat.",
            RecordingOracle(),
            [SimplifyState.INITIAL, SimplifyState.ALREADY_SIMPLE],
        ),
        (
            COMPLEX_TEXT,
            RecordingOracle(),
            [SimplifyState.INITIAL, SimplifyState.EXPLORING, SimplifyState.NO_CANDIDATES],
        ),
        ("   ", RecordingOracle(), [SimplifyState.INITIAL, SimplifyState.NO_CANDIDATES]),
    ],
)
def test_trace_records_state_transitions(
    text: str, oracle: RecordingOracle, expected: list[SimplifyState]
) -> None:
    recorder = TraceRecorder()

    simplify(text, 3, 80.0, oracle=oracle, observer=recorder)

    assert recorder.states() == expected
    assert recorder.events[-1].state.is_terminal
    assert not any(event.state.is_terminal for event in recorder.events[:-1])


def test_done_event_carries_selection_details() -> None:
    recorder = TraceRecorder()
    Simplifier(RecordingOracle(default=PLAIN_REWRITE), observer=recorder).simplify(COMPLEX_TEXT)

    done = recorder.events[-1]
    assert done.state is SimplifyState.DONE
    assert done.data["diversity_level"] == 1
    assert done.data["paths_explored"] == 3
    assert done.timestamp


def test_failing_observer_does_not_change_the_result() -> None:
    def exploding_observer(event: SimplifyEvent) -> None:
        raise RuntimeError("observer bug")

    oracle = RecordingOracle(default=PLAIN_REWRITE)
    quiet = simplify(COMPLEX_TEXT, 3, 80.0, oracle=oracle)
    noisy = simplify(COMPLEX_TEXT, 3, 80.0, oracle=oracle, observer=exploding_observer)

    assert noisy == quiet


def test_simplifier_builds_oracle_lazily(monkeypatch: Any) -> None:
    built: list[RecordingOracle] = []

    def fake_build_oracle() -> RecordingOracle:
        oracle = RecordingOracle(default=PLAIN_REWRITE)
        built.append(oracle)
        return oracle

    monkeypatch.setattr("qsol_simplify.pipelines.simplification.build_oracle", fake_build_oracle)

    simplifier = Simplifier()
    assert built == []

    result = simplifier.simplify(COMPLEX_TEXT)
    assert result.simplified == PLAIN_REWRITE
    assert len(built) == 1
    assert simplifier.oracle is built[0]


def test_selector_returning_nothing_is_an_error(monkeypatch: Any) -> None:
    monkeypatch.setattr("qsol_simplify.pipelines.simplification.select", lambda candidates: None)

    with pytest.raises(RuntimeError, match="no candidate"):
        simplify(COMPLEX_TEXT, 3, 80.0, oracle=RecordingOracle(default=PLAIN_REWRITE))
