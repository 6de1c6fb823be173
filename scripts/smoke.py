# scripts/smoke.py
"""
Smoke Test Script for the qsol-simplify pipeline.

Runs one simplification end to end and prints the trace. Without an API
key the oracle falls back to the offline lexical backend, so this works
on a fresh checkout.

Usage
-----
1. Test with default hardcoded text:
    $ python scripts/smoke.py

2. Test with a local text file and the subprocess transport:
    $ python scripts/smoke.py --file notes.txt --subprocess
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from qsol_simplify.core.evals.readability import flesch_reading_ease
from qsol_simplify.pipelines.simplification import Simplifier, TraceRecorder
from qsol_simplify.transport.subprocess_client import SubprocessSimplifier

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")
else:
    print("⚠️  No .env file found; the offline lexical oracle will be used.")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
DEFAULT_TEXT = (
    "In order to facilitate the implementation of the new methodology, "
    "individuals are required to demonstrate sufficient comprehension of its "
    "numerous components; consequently, a significant amount of training is "
    "necessary prior to commencement."
)


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run qsol-simplify Smoke Test")
    parser.add_argument("--file", "-f", type=str, help="Path to a UTF-8 text file")
    parser.add_argument("--paths", "-n", type=int, default=3, help="Exploration paths")
    parser.add_argument("--target", "-t", type=float, default=80.0, help="Target score")
    parser.add_argument(
        "--subprocess", action="store_true", help="Run through the stdio worker"
    )
    args = parser.parse_args()

    # 1. Prepare Input Data
    if args.file:
        input_path = Path(args.file)
        if not input_path.exists():
            print(f"❌ File not found: {input_path}")
            return
        print(f"\n📂 Using input file: {input_path}")
        text = input_path.read_text(encoding="utf-8")
    else:
        print("\n📝 Using default test text (No --file provided)")
        text = DEFAULT_TEXT

    # 2. Execution Phase
    recorder = TraceRecorder()
    try:
        if args.subprocess:
            print("... Invoking the stdio worker ...")
            result = SubprocessSimplifier().simplify(text, args.paths, args.target)
        else:
            print("... Invoking Simplifier.simplify() ...")
            result = Simplifier(observer=recorder).simplify(text, args.paths, args.target)
    except Exception as exc:
        print(f"\n❌ Simplification Crashed: {exc}")
        traceback.print_exc()
        return

    # 3. Inspection Phase
    print("\n" + "=" * 60)
    print("✅ Simplification Finished")
    print("=" * 60)
    print(f"\n📊 Score: {flesch_reading_ease(text):.2f} -> {result.score:.2f}")
    print(f"🧭 Paths explored: {result.paths_explored}")
    print(f"\n📄 Result:\n{result.simplified}")

    if recorder.events:
        print("\n🕵️  Trace Log:")
        for i, event in enumerate(recorder.events):
            print(f"  {i + 1}. {event.state.value}: {event.note}")


if __name__ == "__main__":
    main()
