"""
CLI for repository triage.

Commands:
    duplicates - Find open issues that likely duplicate each other
    quality    - Flag spam, low-quality and AI-generated items
"""

import asyncio
import json
import logging
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table as RichTable

from ..engine.service import build_service
from ..errors import FatalInputError
from ..observability.tracing import configure_langsmith
from ..schemas.report import AnalysisReport, EngineKind

app = typer.Typer(
    name="triage",
    help="Repository triage - duplicate and spam/quality analysis of open GitHub items",
)
console = Console()


def _run(owner: str, repo: str, engine: EngineKind, deadline: Optional[float]) -> AnalysisReport:
    configure_langsmith()
    service = build_service()
    return asyncio.run(service.analyze(owner, repo, engine=engine, deadline_seconds=deadline))


def _print_report(report: AnalysisReport, as_json: bool) -> None:
    if as_json:
        body = report.model_dump(mode="json", by_alias=True)
        body["message"] = report.message
        typer.echo(json.dumps(body, indent=2))
        return

    if not report.results:
        rprint(f"[yellow]{report.message}[/yellow]")
        return

    table = RichTable(title=f"{report.owner}/{report.repo} - {report.engine.value}")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Title")
    table.add_column("Action", style="magenta")
    table.add_column("Confidence", justify="right")
    if report.engine == EngineKind.DUPLICATE:
        table.add_column("Similar to")
    else:
        table.add_column("Flag")

    for result in report.results:
        verdict = result.verdict
        if report.engine == EngineKind.DUPLICATE:
            extra = ", ".join(
                f"#{c.target_id} ({c.percent:.0f}%)" for c in result.candidates
            )
        else:
            extra = verdict.flag.value
        source = " [dim](fallback)[/dim]" if verdict.is_fallback else ""
        table.add_row(
            str(result.document.id),
            result.document.title[:60],
            verdict.suggested_action.value + source,
            f"{verdict.confidence:g}",
            extra,
        )

    console.print(table)

    summary = report.summary
    rprint(f"\n[green]{report.message}[/green]")
    rprint(
        f"  Analyzed: {summary.total_analyzed}  Reported: {summary.reported}  "
        f"Suppressed: {summary.suppressed}  Failed: {summary.failed}  "
        f"Fallbacks: {summary.fallback_count}"
    )


def _analyze(
    owner: str,
    repo: str,
    engine: EngineKind,
    as_json: bool,
    deadline: Optional[float],
    verbose: bool,
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        report = _run(owner, repo, engine, deadline)
    except FatalInputError as e:
        rprint(f"[red]{e.error_kind}: {e.message}[/red]")
        raise typer.Exit(1)
    _print_report(report, as_json)


@app.command()
def duplicates(
    owner: str = typer.Argument(..., help="Repository owner"),
    repo: str = typer.Argument(..., help="Repository name"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    deadline: Optional[float] = typer.Option(None, "--deadline", "-d", help="Time budget in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
):
    """
    Find open issues that likely duplicate each other.

    Examples:
        triage duplicates octocat hello-world
        triage duplicates octocat hello-world --json --deadline 120
    """
    _analyze(owner, repo, EngineKind.DUPLICATE, as_json, deadline, verbose)


@app.command()
def quality(
    owner: str = typer.Argument(..., help="Repository owner"),
    repo: str = typer.Argument(..., help="Repository name"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    deadline: Optional[float] = typer.Option(None, "--deadline", "-d", help="Time budget in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
):
    """Flag spam, low-quality and AI-generated issues and pull requests."""
    _analyze(owner, repo, EngineKind.QUALITY, as_json, deadline, verbose)


if __name__ == "__main__":
    app()
