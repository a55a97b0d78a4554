"""Configuration loading and management for Ultra Debugger.

Configuration sources are merged in priority order:
    1. Defaults (defined in DebuggerConfig)
    2. Global config (~/.ultra-debugger.toml)
    3. Project config (./ultra-debugger.toml)
    4. Explicit config file
    5. Environment variables (ULTRA_DEBUGGER_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(save_report=False, pass_probability=1.0)
    >>> config.save_report
    False
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "ULTRA_DEBUGGER_"


@dataclass(frozen=True)
class DebuggerConfig:
    """Configuration for one debugging run.

    Attributes:
        Persistence:
            output_dir: Directory that receives reports and fixed code
            report_name: Single-file report filename
            fixed_name: Single-file fixed code filename
            multi_report_name: Batch report filename
            save_report: Write the JSON report after each run
            save_fixed_code: Write the remediated source after each run

        Detection:
            use_external_linter: Try ESLint before the builtin detectors
            linter_command: Command used to invoke ESLint
            linter_timeout_seconds: Timeout for one ESLint invocation
            complexity_line_limit: Function bodies longer than this are flagged
            snippet_length: Max characters kept from unreachable code

        Simulated execution (synthetic telemetry only):
            pass_probability: Chance that a synthetic suite reports "passed"
            memory_sample_limit: Host memory samples taken per run
            memory_sample_interval: Seconds between memory samples
            max_execution_delay: Upper bound of the simulated run delay
            suite_delay: Simulated duration of each test suite

        File access:
            timeout_seconds: Timeout for reading a source file
            max_file_size_mb: Largest source file accepted
    """

    # Persistence
    output_dir: str = "."
    report_name: str = "debug-report.json"
    fixed_name: str = "fixed-code.js"
    multi_report_name: str = "multi-file-debug-report.json"
    save_report: bool = True
    save_fixed_code: bool = True

    # Detection
    use_external_linter: bool = False
    linter_command: list[str] = field(default_factory=lambda: ["npx", "--no-install", "eslint"])
    linter_timeout_seconds: int = 30
    complexity_line_limit: int = 50
    snippet_length: int = 50

    # Simulated execution
    pass_probability: float = 0.9
    memory_sample_limit: int = 10
    memory_sample_interval: float = 0.1
    max_execution_delay: float = 1.0
    suite_delay: float = 0.05

    # File access
    timeout_seconds: int = 10
    max_file_size_mb: float = 10.0

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0.0 <= self.pass_probability <= 1.0:
            raise InvalidConfigError(
                "pass_probability", self.pass_probability, "must be between 0.0 and 1.0"
            )
        for name in ("complexity_line_limit", "snippet_length", "linter_timeout_seconds",
                     "timeout_seconds"):
            value = getattr(self, name)
            if value < 1:
                raise InvalidConfigError(name, value, "must be at least 1")
        if self.memory_sample_limit < 0:
            raise InvalidConfigError(
                "memory_sample_limit", self.memory_sample_limit, "must not be negative"
            )
        for name in ("memory_sample_interval", "max_execution_delay", "suite_delay"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidConfigError(name, value, "must not be negative")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError(
                "max_file_size_mb", self.max_file_size_mb, "must be positive"
            )
        if not isinstance(self.linter_command, (list, tuple)) or not all(
            isinstance(part, str) and part for part in self.linter_command
        ):
            raise InvalidConfigError(
                "linter_command", self.linter_command, "must be a list of non-empty strings"
            )
        if not self.linter_command:
            raise InvalidConfigError("linter_command", self.linter_command, "must not be empty")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be one of quiet, normal, verbose"
            )

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)


DEFAULT_CONFIG = DebuggerConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> DebuggerConfig:
    """Load configuration from all sources and merge them.

    Args:
        config_file: Optional explicit TOML file
        **overrides: Highest-priority values (usually CLI flags). ``None``
            values are ignored so unset CLI options don't mask file values.

    Returns:
        Validated DebuggerConfig

    Raises:
        ConfigurationError: If a file is missing or malformed, or a field is unknown
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".ultra-debugger.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "ultra-debugger.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DebuggerConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ULTRA_DEBUGGER_* environment variables.

    Every scalar field of DebuggerConfig can be set this way, e.g.
    ULTRA_DEBUGGER_SAVE_REPORT=false or ULTRA_DEBUGGER_PASS_PROBABILITY=1.0.
    List fields (linter_command) are only configurable from TOML.
    """
    type_hints = get_type_hints(DebuggerConfig)

    result: dict[str, Any] = {}

    for field_name in DebuggerConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field type isn't env-configurable

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
