"""CLI entry point: registers the debug command."""

import typer

app = typer.Typer(
    name="ultra-debugger",
    help="Ultra Debugger - static analysis, simulated execution and auto-fix for AI-generated JavaScript",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import commands to register them
from .debug import debug as _debug  # noqa: F401, E402
