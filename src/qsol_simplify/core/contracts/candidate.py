"""Candidate rewrites produced by the explorer and ranked by the selector.

Both models are frozen value objects that live only inside a single
``simplify()`` call.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Candidate(BaseModel):
    """A rewrite returned by the oracle together with its readability score.

    Fields
    ------
    simplified_text : str
        The cleaned rewrite returned by the oracle.
    raw_score : float
        Flesch reading-ease score of ``simplified_text``.
    diversity_level : int | None
        The 1-based diversity level that produced this rewrite. Generation
        order follows this value.
    """

    model_config = ConfigDict(frozen=True)

    simplified_text: str
    raw_score: float
    diversity_level: int | None = Field(default=None, ge=1)


class DecayedCandidate(Candidate):
    """A candidate annotated with its position and golden-ratio decay score.

    ``decay_score = raw_score * PHI ** (-position)`` where ``position`` is the
    0-based generation index, never the score rank.
    """

    position: int = Field(ge=0)
    decay_score: float

    def as_candidate(self) -> Candidate:
        """Drop the selector annotations and return the plain candidate."""
        return Candidate(
            simplified_text=self.simplified_text,
            raw_score=self.raw_score,
            diversity_level=self.diversity_level,
        )


__all__ = ["Candidate", "DecayedCandidate"]
