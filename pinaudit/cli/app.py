"""Main Typer application — imports and registers all CLI commands.

Entry point: ``pinaudit`` (configured via pyproject.toml [project.scripts]).
"""

from __future__ import annotations

import typer

from pinaudit.cli.commands.check import check_cmd
from pinaudit.cli.commands.locate import locate_cmd

app = typer.Typer(
    name="pinaudit",
    help="pinaudit: report pinned engines with newer upstream tags or commits.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="check", help="Audit all engines and emit the rebuild matrix.")(check_cmd)
app.command(name="locate", help="Show the upstream repository of one engine.")(locate_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
