"""``pinaudit check`` — audit every engine and emit the rebuild matrix.

Prints a summary table to stderr, the matrix JSON to stdout, and, when
running under GitHub Actions, writes it to the ``matrix`` step output.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pinaudit.cli.output import configure_logging, running_in_actions, write_step_output
from pinaudit.config import AuditConfig
from pinaudit.core.catalog import CatalogError
from pinaudit.core.runner import AuditRunner
from pinaudit.models.issues import AuditResult, TagIssue

console = Console(stderr=True)


def check_cmd(
    engines_path: Path = typer.Option(
        None,
        "--engines",
        "-e",
        help="Directory containing one folder per engine.",
    ),
    token: str = typer.Option(
        None,
        "--token",
        "-t",
        help="GitHub token (defaults to PINAUDIT_GITHUB_TOKEN / GITHUB_TOKEN).",
    ),
    workers: int = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Number of engines checked concurrently.",
    ),
    github_output: bool = typer.Option(
        True,
        "--github-output/--no-github-output",
        help="Write the matrix to $GITHUB_OUTPUT when it is set.",
    ),
) -> None:
    """Report engines whose upstream has a newer tag or commit."""
    overrides: dict[str, object] = {}
    if engines_path is not None:
        overrides["engines_path"] = engines_path
    if token is not None:
        overrides["github_token"] = token
    if workers is not None:
        overrides["max_workers"] = workers
    config = AuditConfig(**overrides)
    configure_logging(config.log_level, console)

    try:
        with AuditRunner(config) as runner:
            result = runner.run()
    except CatalogError as exc:
        console.print(f"[bold red]Audit failed:[/bold red] {exc}")
        if running_in_actions():
            typer.echo(f"::error::{exc}")
        raise typer.Exit(code=1)

    _print_summary(result)

    matrix = json.dumps(result.to_matrix())
    typer.echo(matrix)
    if github_output:
        write_step_output("matrix", matrix)


def _print_summary(result: AuditResult) -> None:
    console.print(
        f"[bold]{result.checked}[/bold] checked, "
        f"[dim]{result.skipped} skipped[/dim], "
        f"{'[red]' if result.failed else ''}{result.failed} failed"
        f"{'[/red]' if result.failed else ''}"
    )
    if not result.issues:
        console.print("[green]All engines are up to date.[/green]")
        return

    table = Table(title="Outdated Engines")
    table.add_column("Engine", style="cyan")
    table.add_column("Axis")
    table.add_column("Pinned", style="yellow")
    table.add_column("Latest", style="green")
    for issue in result.issues:
        if isinstance(issue, TagIssue):
            table.add_row(issue.engine_name, "tag", issue.old_tag, issue.new_tag)
        else:
            table.add_row(issue.engine_name, "commit", issue.old_hash, issue.new_hash)
    console.print(table)
