"""Exception hierarchy for Ultra Debugger."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    LinterUnavailableError,
    PipelineError,
)
from .base import UltraDebuggerError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "UltraDebuggerError",
    "AnalysisError",
    "FileAccessError",
    "PipelineError",
    "LinterUnavailableError",
    "ConfigurationError",
    "InvalidConfigError",
]
