"""
CLI Interface
=============
Command-line interface for the question extraction engine.

Usage:
    python -m question_extractor extract <file> [options]
    python -m question_extractor batch <directory> [options]
    python -m question_extractor info <file>
    python -m question_extractor serve [options]
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
)
from rich.table import Table

from . import __version__
from .engine import ExtractionEngine, ExtractorConfig
from .exceptions import ExtractionError
from .loader import SUPPORTED_SUFFIXES, load_text

console = Console()

TIER_STYLES = {"alto": "green", "medio": "yellow", "baixo": "red"}
LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


@click.group()
@click.version_option(version=__version__, prog_name="question-extractor")
def cli():
    """Question Extractor: multiple-choice exam question extraction."""
    pass


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--file-name", "-n", default=None,
              help="Name used for board/year hints (default: the file's own name)")
@click.option("--min-score", default=20, type=int, show_default=True,
              help="Lowest quality score a question may have to be kept")
@click.option("--log-level", default="INFO", type=LOG_LEVELS, show_default=True)
@click.option("--log-file", default=None, type=click.Path(dir_okay=False),
              help="Also write logs to this file")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False),
              help="Save the JSON result to this file")
@click.option("--json-output", is_flag=True,
              help="Print only the JSON result (for scripts)")
def extract(
    file_path: str,
    file_name: str,
    min_score: int,
    log_level: str,
    log_file: str,
    output: str,
    json_output: bool,
):
    """Extract questions from a TXT or PDF document."""

    # Keep stdout clean for the JSON payload
    if json_output:
        log_level = "ERROR"
    else:
        _banner(
            f"Question Extractor v{__version__}",
            f"Extracting: {os.path.basename(file_path)}",
        )

    engine = ExtractionEngine(ExtractorConfig(
        min_score=min_score,
        log_level=log_level,
        log_file=log_file,
    ))

    try:
        text = load_text(file_path)
        result = engine.extract(text, file_name or os.path.basename(file_path))
    except ExtractionError as e:
        if json_output:
            print(json.dumps(e.to_dict(), ensure_ascii=False))
        else:
            console.print(f"[red]Error:[/] {e.message}")
        sys.exit(1)
    except (FileNotFoundError, RuntimeError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/] {e}")
        if log_level.upper() == "DEBUG":
            console.print_exception()
        sys.exit(1)

    if output:
        _write_json(Path(output), result)

    if json_output:
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return

    _display_results(result)
    if output:
        console.print(f"[dim]Saved JSON output: {output}[/]")


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--output", "-o", default="output", show_default=True,
              help="Directory for the <name>_questions.json files")
@click.option("--min-score", default=20, type=int, show_default=True)
@click.option("--log-level", default="WARNING", type=LOG_LEVELS, show_default=True)
def batch(directory: str, output: str, min_score: int, log_level: str):
    """Extract questions from every TXT/PDF document in a directory."""

    files = sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
    )
    if not files:
        console.print(f"[yellow]No TXT or PDF files found in: {directory}[/]")
        return

    _banner(
        "Batch Question Extractor",
        f"{len(files)} documents in {directory}",
    )

    engine = ExtractionEngine(ExtractorConfig(min_score=min_score, log_level=log_level))
    output_dir = Path(output)
    results, errors = [], []

    with Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Starting...", total=len(files))

        for doc_file in files:
            progress.update(task, description=doc_file.name)
            try:
                result = engine.extract(load_text(str(doc_file)), doc_file.name)
            except ExtractionError as e:
                errors.append((doc_file.name, e.message))
            except (FileNotFoundError, RuntimeError) as e:
                errors.append((doc_file.name, str(e)))
            else:
                _write_json(output_dir / f"{doc_file.stem}_questions.json", result)
                results.append((doc_file.name, result))
            progress.advance(task)

    _display_batch_summary(results, errors)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
def info(file_path: str):
    """Show board, year, answer key and winning strategy for a document."""

    try:
        details = ExtractionEngine(ExtractorConfig(log_level="WARNING")).inspect(
            load_text(file_path), os.path.basename(file_path)
        )
    except (FileNotFoundError, RuntimeError, ExtractionError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    table = Table(title="Document Information", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")
    for label, value in (
        ("File", details["file_name"]),
        ("Characters", details["characters"]),
        ("Banca", details["banca"]),
        ("Ano", details["ano_referencia"] or "-"),
        ("Gabarito Entries", len(details["gabarito"])),
        ("Winning Strategy", details["strategy"] or "[red]none[/]"),
        ("Candidates", details["candidates"]),
    ):
        table.add_row(label, str(value))

    console.print()
    console.print(table)
    console.print()


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=5000, type=int, show_default=True)
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
def serve(host: str, port: int, debug: bool):
    """Start the HTTP microservice."""
    from .server import run_server

    _banner("Question Extractor Microservice", f"Listening on {host}:{port}")
    run_server(host=host, port=port, debug=debug)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _banner(title: str, subtitle: str):
    console.print()
    console.print(Panel.fit(
        f"[bold cyan]{title}[/]\n[dim]{subtitle}[/]", border_style="cyan"
    ))
    console.print()


def _write_json(path: Path, result):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)


def _shorten(text: str, width: int = 60) -> str:
    return text if len(text) <= width else text[:width - 3] + "..."


def _display_results(result):
    """Render the stats table and one row per accepted question."""
    stats = result.stats
    summary = Table(title="Extraction Summary", border_style="green")
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Questions", str(stats.total))
    summary.add_row("Gabarito Identified", str(stats.gabarito_identified))
    summary.add_row("Average Quality", str(stats.avg_quality))
    summary.add_row("Strategy", stats.extraction_method)

    questions = Table(title="Questions", border_style="cyan")
    for name, justify in (
        ("#", "right"), ("Enunciado", "left"), ("Resp.", "center"),
        ("Disciplina", "left"), ("Tema", "left"), ("Score", "right"),
    ):
        questions.add_column(name, justify=justify)

    for idx, q in enumerate(result.questions, start=1):
        style = TIER_STYLES.get(q.nivel_confianca.value, "white")
        questions.add_row(
            str(q.numero or idx),
            _shorten(q.enunciado),
            q.resposta_correta,
            q.disciplina,
            q.tema,
            f"[{style}]{q.score_qualidade}[/]",
        )

    console.print()
    console.print(summary)
    console.print()
    console.print(questions)
    console.print()


def _display_batch_summary(results, errors):
    """One row per document, failures last."""
    table = Table(title="Batch Processing Summary", border_style="cyan")
    table.add_column("Document", style="bold")
    table.add_column("Questions", justify="right")
    table.add_column("With Answer", justify="right")
    table.add_column("Avg Quality", justify="right")
    table.add_column("Status", justify="center")

    for name, result in results:
        stats = result.stats
        table.add_row(
            name,
            str(stats.total),
            str(stats.gabarito_identified),
            str(stats.avg_quality),
            "[green]✓[/]" if stats.avg_quality >= 70 else "[yellow]⚠[/]",
        )
    for name, _ in errors:
        table.add_row(name, "-", "-", "-", "[red]FAILED[/]")

    console.print()
    console.print(table)
    for name, error in errors:
        console.print(f"[red]{name}:[/] {error}")

    total_questions = sum(result.stats.total for _, result in results)
    console.print(
        f"\n[bold]Total:[/] {total_questions} questions from "
        f"{len(results)} documents, {len(errors)} failures\n"
    )


if __name__ == "__main__":
    cli()
