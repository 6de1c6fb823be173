"""
API routes for simplification and scoring.

Endpoints
---------
- `POST /simplify`: Simplify a block of text (synchronous).
- `POST /score`: Return the Flesch reading-ease statistics of a text.

`POST /simplify` is a plain `def` handler, so FastAPI runs it on its thread
pool and slow oracle calls never block the event loop.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from qsol_simplify.core.evals.readability import readability_stats
from qsol_simplify.core.settings import load_settings
from qsol_simplify.llm.oracle import build_oracle
from qsol_simplify.pipelines.simplification import Simplifier
from qsol_simplify.transport.protocol import (
    ScoreRequest,
    ScoreResponse,
    SimplifyRequest,
    SimplifyResponse,
)

router = APIRouter(tags=["Simplification"])


def get_simplifier() -> Simplifier:
    """Build a simplifier from settings; overridden in tests."""
    cfg = load_settings()
    return Simplifier(
        build_oracle(settings=cfg),
        max_workers=cfg.parallel_paths,
        path_timeout=cfg.oracle_timeout_seconds if cfg.parallel_paths > 1 else None,
    )


@router.post(
    "/simplify",
    response_model=SimplifyResponse,
    summary="Simplify a block of text",
)
def simplify_text(
    request: SimplifyRequest,
    simplifier: Annotated[Simplifier, Depends(get_simplifier)],
) -> SimplifyResponse:
    """
    Rewrite `text` until it reaches `target_score`, or return it unchanged.

    `num_paths` and `target_score` fall back to the server settings.
    """
    cfg = load_settings()
    result = simplifier.simplify(
        request.text,
        request.num_paths if request.num_paths is not None else cfg.num_paths,
        request.target_score if request.target_score is not None else cfg.target_score,
    )
    return SimplifyResponse.from_result(result)


@router.post("/score", response_model=ScoreResponse, summary="Score readability")
def score_text(request: ScoreRequest) -> ScoreResponse:
    """Return the Flesch reading-ease score and the counts behind it."""
    stats = readability_stats(request.text)
    return ScoreResponse(
        score=stats.score,
        sentences=stats.sentences,
        words=stats.words,
        syllables=stats.syllables,
    )


__all__ = ["router", "get_simplifier"]
