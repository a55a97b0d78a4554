"""The debug command: run the pipeline on one or more files."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from ..controller import DebugController
from ..exceptions import UltraDebuggerError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def debug(
    files: Optional[list[Path]] = typer.Argument(
        None,
        help="JavaScript/TypeScript files to debug",
        show_default=False,
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Output directory for reports and fixed code (default: current directory)",
    ),
    report_name: Optional[str] = typer.Option(
        None,
        "-r",
        "--report",
        help="Report filename (default: debug-report.json)",
    ),
    fixed_name: Optional[str] = typer.Option(
        None,
        "-f",
        "--fixed",
        help="Fixed code filename (default: fixed-code.js)",
    ),
    multiple: bool = typer.Option(
        False,
        "-m",
        "--multiple",
        help="Debug multiple files (implied by more than one path)",
    ),
    no_report: bool = typer.Option(False, "--no-report", help="Don't save the debug report"),
    no_fixed: bool = typer.Option(False, "--no-fixed", help="Don't save the fixed code"),
    eslint: Optional[bool] = typer.Option(
        None,
        "--eslint/--no-eslint",
        help="Try ESLint before the builtin detectors (falls back when unavailable)",
        show_default=False,
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        help="Output format: rich | json",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="TOML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable DEBUG logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log lines to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """
    Debug AI-generated JavaScript: detect issues, simulate execution, apply fixes.

    [bold cyan]Examples:[/bold cyan]

      ultra-debugger app.js

      ultra-debugger app.js -o ./debug-output

      ultra-debugger -m app.js utils.js

      ultra-debugger app.js --no-fixed --format json
    """
    from .. import __version__

    if version:
        console.print(
            f"[bold cyan]Ultra Debugger[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)

    if not files:
        console.print("[red]Error:[/red] at least one file path is required")
        raise typer.Exit(1)

    missing = [path for path in files if not path.is_file()]
    if missing:
        for path in missing:
            console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        formatter = get_formatter(output_format)
        cfg = resolve_config(
            config=config,
            output_dir=output_dir,
            report_name=report_name,
            fixed_name=fixed_name,
            no_report=no_report,
            no_fixed=no_fixed,
            eslint=eslint,
            verbose=verbose,
            quiet=quiet,
        )
        controller = DebugController(cfg)

        if multiple or len(files) > 1:
            result = asyncio.run(controller.debug_many(files))
        else:
            result = asyncio.run(controller.debug_one(files[0]))

        formatter.render(result)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except UltraDebuggerError as e:
        logger.debug("Debug run failed", exc_info=True)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Debugging interrupted[/yellow]")
        raise typer.Exit(130)
