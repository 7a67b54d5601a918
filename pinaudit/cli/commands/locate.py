"""``pinaudit locate ENGINE`` — show where an engine's build script points."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from pinaudit.config import AuditConfig
from pinaudit.core.catalog import EngineCatalog
from pinaudit.core.locator import build_host_map, locate_repo

console = Console()


def locate_cmd(
    engine: str = typer.Argument(..., help="Engine directory name."),
    engines_path: Path = typer.Option(
        None,
        "--engines",
        "-e",
        help="Directory containing one folder per engine.",
    ),
) -> None:
    """Resolve the upstream repository declared by an engine's build.sh."""
    config = AuditConfig(engines_path=engines_path) if engines_path else AuditConfig()
    catalog = EngineCatalog(config.engines_path)

    script = catalog.read_build_script(engine)
    if script is None:
        console.print(f"[bold red]No build.sh for engine:[/bold red] {engine}")
        raise typer.Exit(code=1)

    coordinate = locate_repo(script, build_host_map(config.gitlab_compatible_host))
    if coordinate is None:
        console.print(f"[yellow]No upstream repository found for[/yellow] {engine}")
        raise typer.Exit(code=1)

    console.print(f"[bold]Platform:[/bold]     {coordinate.platform.value}")
    console.print(f"[bold]Organization:[/bold] {coordinate.organization}")
    console.print(f"[bold]Repository:[/bold]   {coordinate.repository}")
    console.print(f"[bold]Clone URL:[/bold]    {coordinate.clone_url}")
