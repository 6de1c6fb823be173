"""
One-shot stdio worker.

Reads a single JSON request from stdin, runs the simplifier, and writes a
single JSON response to stdout. Diagnostics go to stderr.

Exit codes
----------
0   success; stdout holds the response object
2   invalid request (see stderr)
1   any other failure (see stderr)

Usage
-----
    $ echo '{"text": "..."}' | python -m qsol_simplify.transport.worker
"""

from __future__ import annotations

import json
import sys
from typing import TextIO

from dotenv import load_dotenv

from qsol_simplify.core.errors import InvalidInputError
from qsol_simplify.core.settings import get_logger, load_settings
from qsol_simplify.llm.oracle import build_oracle
from qsol_simplify.pipelines.simplification import Simplifier
from qsol_simplify.transport.protocol import (
    EXIT_FAILURE,
    EXIT_INVALID_INPUT,
    EXIT_OK,
    SimplifyResponse,
    parse_request,
)

logger = get_logger("qsol_simplify.worker")


def run(stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    """Serve one request; return the process exit code."""
    try:
        request = parse_request(stdin.read())
    except InvalidInputError as exc:
        print(str(exc), file=stderr)
        return EXIT_INVALID_INPUT

    cfg = load_settings()
    try:
        simplifier = Simplifier(
            build_oracle(settings=cfg),
            max_workers=cfg.parallel_paths,
            path_timeout=cfg.oracle_timeout_seconds if cfg.parallel_paths > 1 else None,
        )
        result = simplifier.simplify(
            request.text,
            request.num_paths if request.num_paths is not None else cfg.num_paths,
            request.target_score if request.target_score is not None else cfg.target_score,
        )
    except Exception as exc:
        logger.exception("Simplification failed")
        print(f"Simplification failed: {type(exc).__name__}: {exc}", file=stderr)
        return EXIT_FAILURE

    stdout.write(json.dumps(SimplifyResponse.from_result(result).model_dump()))
    stdout.write("\n")
    stdout.flush()
    return EXIT_OK


def main() -> int:
    load_dotenv()
    return run(sys.stdin, sys.stdout, sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
