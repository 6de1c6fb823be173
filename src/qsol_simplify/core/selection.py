"""Decay-weighted candidate selection (the "phi-spiral gate").

Each candidate's raw readability score is discounted by a golden-ratio
power of its 0-based generation position:

    decay_score(i) = raw_score * PHI ** (-i)

The winner is the candidate with the strictly greatest decay score; a
left-to-right scan with ``>`` keeps the earliest candidate on exact ties.
Positions follow generation order (diversity level), not score rank, so
the gate prefers conservative, low-diversity rewrites unless a later one
is substantially more readable.

The discount scales magnitudes toward zero, so for negative raw scores
(very hard text) a later candidate ranks higher than an equal earlier one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from qsol_simplify.core.contracts.candidate import Candidate, DecayedCandidate

#: The golden ratio, (1 + sqrt(5)) / 2.
PHI: float = (1.0 + math.sqrt(5.0)) / 2.0


def decay_weight(position: int) -> float:
    """Return ``PHI ** (-position)`` for a 0-based ``position``."""
    if position < 0:
        raise ValueError(f"position must be >= 0, got {position}")
    return PHI ** (-position)


def decay_candidates(candidates: Sequence[Candidate]) -> list[DecayedCandidate]:
    """Annotate ``candidates`` with their position and decay score, in order."""
    return [
        DecayedCandidate(
            simplified_text=candidate.simplified_text,
            raw_score=candidate.raw_score,
            diversity_level=candidate.diversity_level,
            position=position,
            decay_score=candidate.raw_score * decay_weight(position),
        )
        for position, candidate in enumerate(candidates)
    ]


def select(candidates: Sequence[Candidate]) -> Candidate | None:
    """Pick the best candidate by decay-weighted score.

    Parameters
    ----------
    candidates:
        Candidates in generation order.

    Returns
    -------
    Candidate | None
        ``None`` for an empty sequence, the sole element (untouched) for a
        single-element sequence, otherwise the input candidate with the
        greatest decay score, earliest first on ties.
    """
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    decayed = decay_candidates(candidates)
    best_index = 0
    for index in range(1, len(decayed)):
        if decayed[index].decay_score > decayed[best_index].decay_score:
            best_index = index
    return candidates[best_index]


__all__ = ["PHI", "decay_weight", "decay_candidates", "select"]
