"""Shared CLI plumbing: logging setup and GitHub Actions step outputs."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str, console: Console) -> None:
    """Route all ``pinaudit`` loggers through Rich on *console*."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def write_step_output(name: str, value: str) -> Path | None:
    """Append ``name=value`` to the ``$GITHUB_OUTPUT`` file, if there is one."""
    target = os.environ.get("GITHUB_OUTPUT")
    if not target:
        return None
    path = Path(target)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(f"{name}={value}\n")
    return path
