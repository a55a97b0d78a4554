"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import DebuggerConfig, load_config

console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    report_name: Optional[str] = None,
    fixed_name: Optional[str] = None,
    no_report: bool = False,
    no_fixed: bool = False,
    eslint: Optional[bool] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> DebuggerConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if output_dir is not None:
        overrides["output_dir"] = str(output_dir)
    if report_name is not None:
        overrides["report_name"] = report_name
    if fixed_name is not None:
        overrides["fixed_name"] = fixed_name
    if no_report:
        overrides["save_report"] = False
    if no_fixed:
        overrides["save_fixed_code"] = False
    if eslint is not None:
        overrides["use_external_linter"] = eslint
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)
