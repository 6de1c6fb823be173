"""qsol-simplify: readability-targeted text simplification.

The package rewrites a block of text into a simpler form by asking a
rewrite oracle for several candidates and keeping the one picked by the
decay-weighted "phi-spiral gate".
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
