"""Core package for qsol-simplify.

Holds the pure pieces of the simplifier: readability scoring, candidate
exploration, decay-weighted selection, the error taxonomy, and settings.
"""

from __future__ import annotations

__all__ = ["__doc__"]
