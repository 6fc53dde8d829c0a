"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from candidate_ingest.clients.llm_client import LLMClient
from candidate_ingest.config import load_config
from candidate_ingest.models.batch import BatchReport, GroupReport
from candidate_ingest.parsers.delimited_parser import (
    MissingDelimiters,
    parse_candidate_response,
)
from candidate_ingest.parsers.document_loader import load_document
from candidate_ingest.parsers.normalizer import normalize_with_warnings
from candidate_ingest.pipeline.processor import CandidateProcessor
from candidate_ingest.pipeline.scheduler import BatchScheduler
from candidate_ingest.usage.cost_calculator import calculate_cost

app = typer.Typer(
    name="candidate-ingest",
    help="Extract structured candidate records from CV documents with an AI model",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _render_report(report: BatchReport) -> Table:
    table = Table(title="Ingestion results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Candidate")
    table.add_column("Score", justify="right")
    table.add_column("Details")
    for outcome in report.outcomes:
        if outcome.success and outcome.candidate is not None:
            details = "; ".join(outcome.warnings)
            table.add_row(
                str(outcome.input_index + 1),
                outcome.file_name,
                "[green]ok[/green]",
                outcome.candidate.name,
                str(outcome.candidate.score),
                f"[yellow]{details}[/yellow]" if details else "",
            )
        else:
            table.add_row(
                str(outcome.input_index + 1),
                outcome.file_name,
                f"[red]{outcome.error_kind.value if outcome.error_kind else 'failed'}[/red]",
                "-",
                "-",
                outcome.error_message or "",
            )
    return table


@app.command()
def ingest(
    files: list[Path] = typer.Argument(help="CV files to process (PDF/DOCX/TXT/MD)"),
    width: int = typer.Option(None, "--width", "-w", help="Files processed concurrently per group"),
    delay: float = typer.Option(None, "--delay", help="Seconds to wait between groups"),
    deadline: float = typer.Option(None, "--deadline", help="Stop starting new groups after N seconds"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the JSON report to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Process CV files in paced, concurrent groups and report per-file outcomes."""
    _setup_logging(verbose)

    missing = [f for f in files if not f.is_file()]
    if missing:
        for f in missing:
            console.print(f"[red]File not found: {f}[/red]")
        raise typer.Exit(1)

    config = load_config()
    documents = [load_document(f) for f in files]

    llm = LLMClient(
        timeout=config.llm.timeout,
        model=config.llm.model,
        max_retries=config.llm.max_retries,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    processor = CandidateProcessor(
        llm,
        max_file_size_mb=config.ingest.max_file_size_mb,
        allowed_extensions=config.ingest.allowed_extensions,
    )
    scheduler = BatchScheduler(
        processor,
        width=width if width is not None else config.batch.width,
        pacing_delay=delay if delay is not None else config.batch.pacing_delay,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Processing CVs...", total=len(documents))

        def on_group(group: GroupReport) -> None:
            progress.update(
                task,
                advance=group.succeeded + group.failed,
                description=f"Group {group.group_number}/{group.total_groups} done",
            )

        report = asyncio.run(
            scheduler.run(
                documents,
                deadline=deadline if deadline is not None else config.batch.deadline,
                on_group=on_group,
            )
        )

    console.print(_render_report(report))

    usage = llm.get_token_summary()
    color = "green" if report.failed == 0 else ("yellow" if report.succeeded else "red")
    console.print(
        Panel(
            f"[bold {color}]{report.summary_message}[/bold {color}]\n"
            f"Tokens: {usage['input']} in / {usage['output']} out | "
            f"Estimated cost: ${calculate_cost(usage['calls']):.4f}\n"
            f"Elapsed: {report.elapsed_seconds:.1f}s",
            title="Summary",
        )
    )

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(report.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        console.print(f"[green]Report saved: {output}[/green]")

    if report.total and report.succeeded == 0:
        raise typer.Exit(1)


@app.command()
def parse(
    response: Path = typer.Argument(help="Saved model response text file"),
    file_name: str = typer.Option("document", "--file-name", help="Source file name used for defaults"),
) -> None:
    """Parse and normalize a saved model response without calling the API."""
    if not response.exists():
        console.print(f"[red]File not found: {response}[/red]")
        raise typer.Exit(1)

    parsed = parse_candidate_response(response.read_text(encoding="utf-8"))
    if isinstance(parsed, MissingDelimiters):
        console.print(f"[red]{parsed.message}[/red]")
        raise typer.Exit(1)

    candidate, warnings = normalize_with_warnings(parsed, file_name)
    console.print_json(candidate.model_dump_json())
    for warning in warnings:
        console.print(f"[yellow]warning: {warning}[/yellow]")


if __name__ == "__main__":
    app()
