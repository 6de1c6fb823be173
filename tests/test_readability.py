"""Tests for the Flesch reading-ease scorer and its segmentation helpers."""

from __future__ import annotations

import math

import pytest

from qsol_simplify.core.evals.readability import (
    count_sentences,
    count_syllables,
    count_word_syllables,
    count_words,
    flesch_reading_ease,
    readability_stats,
)

COMPLEX_TEXT = (
    "The implementation of comprehensive organizational methodologies "
    "necessitates considerable deliberation among interdisciplinary stakeholders."
)


@pytest.mark.parametrize("text", ["", "   ", "\n\t  \n", "!!! ...", "?!"])  # type: ignore[misc]
def test_degenerate_text_scores_exactly_zero(text: str) -> None:
    """Empty, whitespace-only, or word-free text hits the 0.0 floor."""
    score = flesch_reading_ease(text)
    assert score == 0.0
    assert not math.isnan(score)


def test_simple_sentence_uses_flesch_formula() -> None:
    """Three one-syllable words in one sentence."""
    expected = 206.835 - 1.015 * 3 - 84.6 * 1
    assert flesch_reading_ease("The cat sat.") == pytest.approx(expected)
    assert flesch_reading_ease("The cat sat.") >= 80.0


def test_complex_text_scores_lower_than_simple_text() -> None:
    assert flesch_reading_ease(COMPLEX_TEXT) < flesch_reading_ease("The cat sat on the mat.")
    assert flesch_reading_ease(COMPLEX_TEXT) < 30.0


def test_score_is_deterministic() -> None:
    assert flesch_reading_ease(COMPLEX_TEXT) == flesch_reading_ease(COMPLEX_TEXT)


@pytest.mark.parametrize(  # type: ignore[misc]
    ("word", "expected"),
    [
        ("cat", 1),
        ("the", 1),
        ("make", 1),
        ("jumped", 1),
        ("makes", 1),
        ("table", 2),
        ("simple", 2),
        ("wanted", 2),
        ("boxes", 2),
        ("yellow", 2),
        ("beautiful", 3),
        ("readability", 5),
        ("2024", 1),
    ],
)
def test_word_syllable_heuristic(word: str, expected: int) -> None:
    assert count_word_syllables(word) == expected


def test_sentence_segmentation() -> None:
    assert count_sentences("Hello world. How are you? Fine!") == 3
    assert count_sentences("Wait... what") == 2
    assert count_sentences("No terminal punctuation") == 1
    assert count_sentences("First paragraph\n\nSecond paragraph") == 2
    assert count_sentences("   ") == 0


def test_word_tokenization_keeps_contractions() -> None:
    assert count_words("Don't stop, it's fine.") == 4
    assert count_words("-- ... --") == 0


def test_stats_are_consistent_with_score() -> None:
    stats = readability_stats("The cat sat. The dog ran away.")
    assert stats.sentences == 2
    assert stats.words == 7
    assert stats.syllables == count_syllables("The cat sat. The dog ran away.")
    assert stats.avg_sentence_length == pytest.approx(3.5)
    assert stats.score == pytest.approx(flesch_reading_ease("The cat sat. The dog ran away."))


def test_stats_for_empty_text_are_all_zero() -> None:
    stats = readability_stats("")
    assert (stats.sentences, stats.words, stats.syllables) == (0, 0, 0)
    assert stats.score == 0.0


def test_single_line_breaks_do_not_end_sentences() -> None:
    """Only terminal punctuation and blank lines split sentences."""
    assert count_sentences("First item\nSecond item\nThird item") == 1
    assert count_sentences("First item.\nSecond item.") == 2
    assert count_sentences("First item\n\nSecond item") == 2
