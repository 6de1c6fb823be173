"""SimplificationResult: the only externally visible output of the core."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SimplificationResult(BaseModel):
    """Outcome of one ``simplify()`` call.

    A result with ``paths_explored == 0`` and ``simplified == original``
    means no rewrite was applied: either the input already met the target,
    or every exploration path came back empty.
    """

    model_config = ConfigDict(frozen=True)

    original: str = Field(description="Input text, verbatim")
    simplified: str = Field(description="Selected rewrite, or the original text")
    score: float = Field(description="Flesch reading ease of `simplified`")
    paths_explored: int = Field(ge=0, description="Number of valid candidates collected")

    @property
    def changed(self) -> bool:
        """Return True if a rewrite was selected."""
        return self.paths_explored > 0

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-safe wire representation."""
        return self.model_dump(mode="json")


__all__ = ["SimplificationResult"]
