# src/qsol_simplify/cli.py
"""
qsol-simplify Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.

Features
--------
- **Simplify**: Rewrite text from an argument, a file, or stdin.
- **Score**: Show the Flesch reading-ease statistics of a text.
- **Trace**: Print the state transitions of a run (`--trace`).
- **Serve**: Start the HTTP API with uvicorn.

Usage
-----
    $ qsol-simplify simplify "The committee will endeavor to facilitate..."
    $ qsol-simplify simplify --file notes.txt --paths 5 --target 70 --json
    $ cat notes.txt | qsol-simplify score
"""

from __future__ import annotations

import json
import sys
import traceback
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from qsol_simplify.core.contracts.simplification import SimplificationResult
from qsol_simplify.core.evals.readability import readability_stats
from qsol_simplify.core.settings import OracleKind, load_settings
from qsol_simplify.llm.oracle import build_oracle
from qsol_simplify.pipelines.simplification import Simplifier, TraceRecorder

# Ensure env vars (like OPENAI_API_KEY) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="qsol-simplify: rewrite text until it is easy to read.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _read_input(text: str | None, file: Path | None) -> str:
    """Resolve the input text from the argument, a file, or stdin."""
    if text is not None and file is not None:
        console.print("[bold red]Pass either TEXT or --file, not both.[/bold red]")
        raise typer.Exit(code=2)
    if file is not None:
        return file.read_text(encoding="utf-8")
    if text is not None:
        return text
    if sys.stdin.isatty():
        console.print("[bold red]No input: pass TEXT, --file, or pipe text on stdin.[/bold red]")
        raise typer.Exit(code=2)
    return sys.stdin.read()


def _render_result(result: SimplificationResult, input_score: float, target: float) -> None:
    """Render a simplification result as a Rich panel."""
    if result.changed:
        status = f"[green]Simplified[/green] using {result.paths_explored} candidate(s)"
    elif input_score >= target:
        status = "[cyan]Already simple[/cyan], returned unchanged"
    else:
        status = "[yellow]No candidate found[/yellow], returned original"

    console.print(
        Panel(
            Text(result.simplified),
            title="Simplified",
            border_style="green" if result.changed else "yellow",
        )
    )
    console.print(status)
    console.print(
        f"Score: {input_score:.2f} -> [bold]{result.score:.2f}[/bold] (target {target:.1f})"
    )


def _render_trace(recorder: TraceRecorder) -> None:
    console.print("\n[bold dim]Execution Trace:[/bold dim]")
    for i, event in enumerate(recorder.events):
        details = ", ".join(f"{k}={v}" for k, v in event.data.items())
        console.print(f" [dim]{i + 1:02d}. {event.state.value}: {event.note or ''} {details}[/dim]")


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def simplify(
    text: Annotated[
        str | None,
        typer.Argument(help="Text to simplify. Reads stdin when omitted."),
    ] = None,
    file: Annotated[
        Path | None,
        typer.Option(
            "--file",
            "-f",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Read the text from a file.",
        ),
    ] = None,
    paths: Annotated[
        int | None,
        typer.Option("--paths", "-n", min=1, help="Number of exploration paths."),
    ] = None,
    target: Annotated[
        float | None,
        typer.Option("--target", "-t", help="Target Flesch reading-ease score."),
    ] = None,
    oracle: Annotated[
        OracleKind | None,
        typer.Option("--oracle", help="Rewrite backend (auto, llm, lexical)."),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model alias for the LLM backend."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as a JSON object."),
    ] = False,
    trace: Annotated[
        bool,
        typer.Option("--trace", help="Print the state transitions of the run."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Simplify a block of text until it reaches the target readability.
    """
    source = _read_input(text, file)
    if not source.strip():
        console.print("[bold yellow]Nothing to simplify: input is empty.[/bold yellow]")
        raise typer.Exit(code=2)

    cfg = load_settings()
    num_paths = paths if paths is not None else cfg.num_paths
    target_score = target if target is not None else cfg.target_score
    recorder = TraceRecorder()

    try:
        rewrite_oracle = build_oracle(oracle, model=model, settings=cfg)
        simplifier = Simplifier(
            rewrite_oracle,
            max_workers=cfg.parallel_paths,
            path_timeout=cfg.oracle_timeout_seconds if cfg.parallel_paths > 1 else None,
            observer=recorder,
        )
        if as_json:
            result = simplifier.simplify(source, num_paths, target_score)
        else:
            with console.status(f"[cyan]Exploring {num_paths} path(s)...", spinner="dots"):
                result = simplifier.simplify(source, num_paths, target_score)
    except Exception as e:
        console.print(f"\n[bold red]Simplification Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(json.dumps(result.to_payload()))
    else:
        _render_result(result, readability_stats(source).score, target_score)

    if trace:
        _render_trace(recorder)


@app.command()  # type: ignore[misc]
def score(
    text: Annotated[
        str | None,
        typer.Argument(help="Text to score. Reads stdin when omitted."),
    ] = None,
    file: Annotated[
        Path | None,
        typer.Option(
            "--file",
            "-f",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Read the text from a file.",
        ),
    ] = None,
) -> None:
    """
    Show the Flesch reading-ease score and the counts behind it.
    """
    stats = readability_stats(_read_input(text, file))

    table = Table(title="Readability", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Sentences", str(stats.sentences))
    table.add_row("Words", str(stats.words))
    table.add_row("Syllables", str(stats.syllables))
    table.add_row("Words / sentence", f"{stats.avg_sentence_length:.2f}")
    table.add_row("Syllables / word", f"{stats.avg_syllables_per_word:.2f}")
    table.add_row("Flesch reading ease", f"{stats.score:.2f}")
    console.print(table)


@app.command()  # type: ignore[misc]
def serve(
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8000,
    reload: Annotated[bool, typer.Option(help="Reload on code changes.")] = False,
) -> None:
    """
    Run the HTTP API with uvicorn.
    """
    from qsol_simplify.api.server import main as serve_api

    serve_api(host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
