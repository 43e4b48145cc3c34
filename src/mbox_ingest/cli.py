"""Command-line interface for mbox ingestion."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config.settings import get_settings, resolve_mbox_files
from .errors import ConfigurationError
from .ingestion.diagnostics import CollectingDiagnostics, StrictDiagnostics
from .ingestion.job import JobSummary, MboxIngestJob
from .ingestion.records import BODY, MESSAGE_DATE, SENDER, Record
from .ingestion.sinks import JsonLinesSink, ListSink

app = typer.Typer(
    name="mbox-ingest",
    help="Parse mbox mail archives into field-tagged records.",
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR). Defaults to settings.",
    ),
):
    """Parse mbox mail archives into field-tagged records."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    _setup_logging(log_level or settings.log_level)


def _print_results(summary: JobSummary, diagnostics: CollectingDiagnostics) -> None:
    table = Table(title="Files")
    table.add_column("File", style="cyan")
    table.add_column("Status", style="magenta")
    table.add_column("Records", justify="right")
    table.add_column("Reason")

    for result in summary.results:
        status = escape(result.status.value)
        if not result.ok:
            status = f"[red]{status}[/red]"
        table.add_row(
            escape(result.path), status, str(result.records), escape(result.reason or "")
        )

    err_console.print(table)
    err_console.print(
        f"  Records: {summary.total_records}  "
        f"Failed files: {len(summary.failed)}  "
        f"Diagnostics: {len(diagnostics)}"
    )


def _print_records(records: list[Record]) -> None:
    table = Table(title="Messages")
    table.add_column("#", justify="right")
    table.add_column("Sender", style="cyan")
    table.add_column("Message Date", style="magenta")
    table.add_column("Subject", style="green")
    table.add_column("Body")

    for i, record in enumerate(records, 1):
        body = record.get(BODY, "")
        if len(body) > 60:
            body = body[:57] + "..."
        table.add_row(
            str(i),
            escape(record.get(SENDER, "")),
            escape(record.get(MESSAGE_DATE, "")),
            escape((record.get("Subject") or "").strip()),
            escape(body),
        )

    console.print(table)


def _resolve_paths(paths: Optional[List[Path]]) -> list[str]:
    try:
        return resolve_mbox_files(paths)
    except ConfigurationError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _diagnostics(strict: bool) -> CollectingDiagnostics:
    return StrictDiagnostics() if strict else CollectingDiagnostics()


@app.command()
def parse(
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="mbox files to parse. Defaults to MBOX_INGEST_MBOX_FILES.",
    ),
    output_format: str = typer.Option(
        "jsonl",
        "--format",
        "-f",
        help="Output format: jsonl or table.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON Lines to this file instead of stdout.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Stop a file at its first malformed header and exit 2 on any failed file.",
    ),
):
    """Parse mbox files and print one record per message."""
    if output_format not in ("jsonl", "table"):
        err_console.print(f"[red]Invalid format: {escape(output_format)}[/red]")
        err_console.print("Valid formats: jsonl, table")
        raise typer.Exit(1)

    files = _resolve_paths(paths)
    settings = get_settings()
    diagnostics = _diagnostics(strict)

    if output_format == "table":
        sink = ListSink()
        job = MboxIngestJob(
            files, sink, diagnostics, settings.encoding, settings.encoding_errors
        )
        summary = job.run()
        _print_records(sink.records)
    elif output:
        with output.open("w", encoding="utf-8") as stream:
            job = MboxIngestJob(
                files,
                JsonLinesSink(stream),
                diagnostics,
                settings.encoding,
                settings.encoding_errors,
            )
            summary = job.run()
    else:
        job = MboxIngestJob(
            files,
            JsonLinesSink(sys.stdout),
            diagnostics,
            settings.encoding,
            settings.encoding_errors,
        )
        summary = job.run()

    _print_results(summary, diagnostics)

    if strict and not summary.ok:
        raise typer.Exit(2)


@app.command()
def load(
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="mbox files to load. Defaults to MBOX_INGEST_MBOX_FILES.",
    ),
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        "-d",
        help="Database URL. Defaults to MBOX_INGEST_DATABASE_URL.",
    ),
    batch_size: int = typer.Option(
        100,
        "--batch-size",
        "-b",
        help="Commit after this many records.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Stop a file at its first malformed header and exit 2 on any failed file.",
    ),
):
    """Parse mbox files and store the records in the database."""
    from .storage.database import init_db
    from .storage.sink import DatabaseSink

    files = _resolve_paths(paths)
    settings = get_settings()
    diagnostics = _diagnostics(strict)
    db = init_db(database_url)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        progress.add_task(f"Loading {len(files)} files...", total=None)
        with DatabaseSink(db, batch_size=batch_size) as sink:
            job = MboxIngestJob(
                files, sink, diagnostics, settings.encoding, settings.encoding_errors
            )
            summary = job.run()

    _print_results(summary, diagnostics)
    console.print(f"[green]Stored {sink.count} records in {escape(db.url)}[/green]")

    if strict and not summary.ok:
        raise typer.Exit(2)


@app.command()
def stats(
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        "-d",
        help="Database URL. Defaults to MBOX_INGEST_DATABASE_URL.",
    ),
):
    """Show database statistics."""
    from .storage.database import init_db

    db = init_db(database_url)
    counts = db.stats()

    table = Table(title="mbox-ingest Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Source Files", str(counts["files"]))
    table.add_row("Messages", str(counts["messages"]))
    table.add_row("Fields", str(counts["fields"]))

    console.print(table)


if __name__ == "__main__":
    app()
