"""pinaudit CLI — Typer-based command-line interface.

Provides the ``pinaudit`` command with subcommands for auditing every
engine and for checking where a single engine's build script points.

Human-readable output goes to stderr through Rich; stdout carries only
machine-readable results.
"""
