"""
Flesch reading-ease scoring.

This module implements the classic Flesch reading-ease formula with a
small, dependency-free segmentation policy. Higher scores mean easier
text; typical prose lands between 0 and 100, very short plain sentences
can exceed 100.

Formula
-------
    ASL   = words / sentences
    ASW   = syllables / words
    score = 206.835 - 1.015 * ASL - 84.6 * ASW

Segmentation
------------
1. Sentences
   - Text is split on runs of ``.``, ``!``, ``?`` and on blank lines.
   - A fragment only counts when it contains at least one word, so
     "Wait..." is one sentence and a trailing "!!!" adds nothing.

2. Words
   - Tokens matching :data:`_WORD_RE`: runs of letters or digits, with
     inner apostrophes kept ("don't" is one word).

3. Syllables
   - Vowel groups over ``aeiouy`` after removing silent endings
     (``-e`` except ``-le``, ``-es`` and ``-ed`` after most consonants).
   - Words of three letters or fewer, and digit-only tokens, count as one.
   - Every word counts as at least one syllable.

Empty or whitespace-only text, or text with no words, scores exactly 0.0.
Every function here is pure and deterministic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+|\n\s*\n")
_WORD_RE = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")
_NON_ALPHA_RE = re.compile(r"[^a-z]")

_SILENT_ED_RE = re.compile(r"(?<=[^aeiouytd])ed$")
_SILENT_ES_RE = re.compile(r"(?<=[^aeiouyszxgch])es$")
_SILENT_E_RE = re.compile(r"(?<=[^aeiouyl])e$")

# Flesch reading-ease coefficients.
BASE_SCORE = 206.835
SENTENCE_WEIGHT = 1.015
SYLLABLE_WEIGHT = 84.6


@dataclass(frozen=True, slots=True)
class ReadabilityStats:
    """Counts and averages behind a single Flesch score.

    Attributes
    ----------
    sentences, words, syllables : int
        Raw segment counts.
    avg_sentence_length : float
        Words per sentence (0.0 when there are no sentences).
    avg_syllables_per_word : float
        Syllables per word (0.0 when there are no words).
    score : float
        Flesch reading ease, 0.0 for degenerate input.
    """

    sentences: int
    words: int
    syllables: int
    avg_sentence_length: float
    avg_syllables_per_word: float
    score: float


def _words(text: str) -> list[str]:
    return _WORD_RE.findall(text)


def count_sentences(text: str) -> int:
    """Return the number of sentences that contain at least one word."""
    stripped = text.strip()
    if not stripped:
        return 0
    return sum(1 for part in _SENTENCE_SPLIT_RE.split(stripped) if _WORD_RE.search(part))


def count_words(text: str) -> int:
    """Return the number of word tokens in ``text``."""
    return len(_words(text))


def count_word_syllables(word: str) -> int:
    """Approximate the syllable count of a single word."""
    letters = _NON_ALPHA_RE.sub("", word.lower())
    if len(letters) <= 3:
        return 1

    if _SILENT_ED_RE.search(letters):
        letters = letters[:-2]
    elif _SILENT_ES_RE.search(letters):
        letters = letters[:-2]
    elif _SILENT_E_RE.search(letters):
        letters = letters[:-1]

    # A leading "y" acts as a consonant ("yellow", "yes").
    if letters.startswith("y"):
        letters = letters[1:]

    return max(1, len(_VOWEL_GROUP_RE.findall(letters)))


def count_syllables(text: str) -> int:
    """Return the total syllable count across all words in ``text``."""
    return sum(count_word_syllables(word) for word in _words(text))


def readability_stats(text: str) -> ReadabilityStats:
    """Compute the counts, averages, and Flesch score for ``text``."""
    if not text.strip():
        return ReadabilityStats(0, 0, 0, 0.0, 0.0, 0.0)

    words = _words(text)
    n_sentences = count_sentences(text)
    n_words = len(words)
    n_syllables = sum(count_word_syllables(word) for word in words)

    if n_sentences == 0 or n_words == 0:
        return ReadabilityStats(n_sentences, n_words, n_syllables, 0.0, 0.0, 0.0)

    asl = n_words / n_sentences
    asw = n_syllables / n_words
    score = BASE_SCORE - SENTENCE_WEIGHT * asl - SYLLABLE_WEIGHT * asw
    return ReadabilityStats(n_sentences, n_words, n_syllables, asl, asw, score)


def flesch_reading_ease(text: str) -> float:
    """Return the Flesch reading-ease score of ``text``.

    Parameters
    ----------
    text:
        Arbitrary input, including empty or whitespace-only strings.

    Returns
    -------
    float
        The score, or exactly 0.0 when the trimmed text is empty or no
        sentence or word can be found. Never NaN.
    """
    return readability_stats(text).score


__all__ = [
    "ReadabilityStats",
    "count_sentences",
    "count_words",
    "count_word_syllables",
    "count_syllables",
    "readability_stats",
    "flesch_reading_ease",
]
