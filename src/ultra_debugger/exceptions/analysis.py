"""Analysis-related exceptions: file access, pipeline stages, external linter."""

from pathlib import Path

from .base import UltraDebuggerError


class AnalysisError(UltraDebuggerError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be read or written."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class PipelineError(AnalysisError):
    """Raised when a detection or remediation stage fails unexpectedly.

    These are implementation bugs rather than bad input. They are kept apart
    from FileAccessError so callers can tell an unreadable file from a broken
    pass.
    """

    def __init__(self, stage: str, reason: str):
        super().__init__(
            f"Pipeline stage '{stage}' failed",
            details={"stage": stage, "reason": reason},
        )
        self.stage = stage
        self.reason = reason


class LinterUnavailableError(AnalysisError):
    """Raised when the external lint engine cannot produce a result."""

    def __init__(self, reason: str):
        super().__init__("External linter unavailable", details={"reason": reason})
        self.reason = reason
