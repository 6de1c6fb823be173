"""Wire contracts for running the simplifier out of process.

Request:  ``{"text": str, "num_paths"?: int >= 1, "target_score"?: number}``
Response: ``{"original": str, "simplified": str, "score": number, "paths_explored": int}``

Only JSON scalars cross the boundary. :func:`parse_request` turns any
malformed payload into :class:`InvalidInputError` with a readable message.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)

from qsol_simplify.core.contracts.simplification import SimplificationResult
from qsol_simplify.core.errors import InvalidInputError

# Worker process exit codes.
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


class SimplifyRequest(BaseModel):
    """A request to simplify one block of text."""

    model_config = ConfigDict(extra="ignore")

    text: StrictStr = Field(description="Text to simplify")
    num_paths: Annotated[StrictInt, Field(ge=1)] | None = Field(
        default=None, description="Exploration paths"
    )
    target_score: StrictFloat | StrictInt | None = Field(
        default=None, description="Flesch reading-ease target"
    )


class SimplifyResponse(BaseModel):
    """Serialized :class:`SimplificationResult`."""

    original: str
    simplified: str
    score: float
    paths_explored: int = Field(ge=0)

    @classmethod
    def from_result(cls, result: SimplificationResult) -> SimplifyResponse:
        return cls.model_validate(result.model_dump())

    def to_result(self) -> SimplificationResult:
        return SimplificationResult.model_validate(self.model_dump())


class ScoreRequest(BaseModel):
    text: StrictStr


class ScoreResponse(BaseModel):
    score: float
    sentences: int
    words: int
    syllables: int


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "request"
        problems.append(f"{location}: {error['msg']}")
    return "Invalid request: " + "; ".join(problems)


def parse_request(raw: str | bytes | Mapping[str, Any]) -> SimplifyRequest:
    """Decode and validate a request payload.

    Raises
    ------
    InvalidInputError
        If the payload is not JSON, not an object, lacks ``text``, or has
        mistyped fields.
    """
    if isinstance(raw, str | bytes):
        if not raw.strip():
            raise InvalidInputError("Invalid request: empty payload")
        try:
            payload: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid request: malformed JSON ({exc.msg})") from exc
    else:
        payload = raw

    if not isinstance(payload, Mapping):
        raise InvalidInputError("Invalid request: expected a JSON object")

    try:
        return SimplifyRequest.model_validate(dict(payload))
    except ValidationError as exc:
        raise InvalidInputError(_format_validation_error(exc)) from exc


__all__ = [
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_INVALID_INPUT",
    "SimplifyRequest",
    "SimplifyResponse",
    "ScoreRequest",
    "ScoreResponse",
    "parse_request",
]
