"""Pipeline entry points for qsol-simplify.

Currently exposed:

- :func:`simplify` / :class:`Simplifier`: score, explore, then select;
  implemented in ``simplification.py``.
"""

from __future__ import annotations

from .simplification import (
    Simplifier,
    SimplifyEvent,
    SimplifyState,
    TraceRecorder,
    simplify,
)

__all__ = ["simplify", "Simplifier", "SimplifyEvent", "SimplifyState", "TraceRecorder"]
