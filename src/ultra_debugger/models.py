"""Data models for Ultra Debugger.

Attributes are snake_case; ``to_dict()`` produces the stable JSON shape that
report consumers key off (``fileName``, ``fixedCode``, ``testResults`` ...).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_ms() -> int:
    """Current wall clock time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _group_by_kind(items) -> dict[str, int]:
    return dict(Counter(item.kind or "unknown" for item in items))


class Severity(Enum):
    ISSUE = "issue"
    WARNING = "warning"


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    kind: str  # "unreachable_code", "potential_timer_leak", ...
    severity: Severity
    offset: Optional[int]  # index into the original text; None for file-level findings
    message: str
    extra: Mapping[str, Any] = field(default_factory=dict)  # kind-specific fields

    def __post_init__(self) -> None:
        # read-only copy of the caller's mapping
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def get(self, key: str, default: Any = None) -> Any:
        return self.extra.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind, "severity": self.severity.value}
        data.update(self.extra)
        if self.offset is not None:
            data["position"] = self.offset
        data["message"] = self.message
        return data


@dataclass
class AnalysisResult:
    file_name: str
    issues: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)
    timestamp: str = field(default_factory=now_iso)
    engine: str = "builtin"  # "builtin" | "eslint"
    lint_results: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "fileName": self.file_name,
            "engine": self.engine,
            "issues": [f.to_dict() for f in self.issues],
            "warnings": [f.to_dict() for f in self.warnings],
            "timestamp": self.timestamp,
        }
        if self.lint_results:
            data["lintResults"] = self.lint_results
        return data


# ---------------------------------------------------------------------------
# Simulated execution
# ---------------------------------------------------------------------------


@dataclass
class TelemetryEvent:
    kind: str  # "execution_start" | "execution_complete" | "test_suite_start" | "test_suite_complete"
    timestamp: int = field(default_factory=now_ms)
    message: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None  # "passed" | "failed" on suite completion

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind}
        for key in ("message", "name", "description", "status"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["timestamp"] = self.timestamp
        return data


@dataclass
class MemorySample:
    timestamp: int
    heap_used: int
    heap_total: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "heapUsed": self.heap_used,
            "heapTotal": self.heap_total,
        }


@dataclass
class ExecutionError:
    kind: str
    message: str
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "message": self.message, "detail": self.detail}


@dataclass
class ExecutionTelemetry:
    file_name: str
    test_results: list[TelemetryEvent] = field(default_factory=list)
    memory_usage: list[MemorySample] = field(default_factory=list)
    execution_errors: list[ExecutionError] = field(default_factory=list)
    timestamp: str = field(default_factory=now_iso)

    def suite_outcomes(self) -> dict[str, str]:
        """Map of suite name to its synthetic status."""
        return {
            e.name: e.status
            for e in self.test_results
            if e.kind == "test_suite_complete" and e.name is not None and e.status is not None
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "testResults": [e.to_dict() for e in self.test_results],
            "memoryUsage": [s.to_dict() for s in self.memory_usage],
            "executionErrors": [e.to_dict() for e in self.execution_errors],
            "timestamp": self.timestamp,
        }


# ---------------------------------------------------------------------------
# Remediation
# ---------------------------------------------------------------------------


@dataclass
class FixRecord:
    kind: str
    message: str
    position: Optional[int] = None
    variable: Optional[str] = None
    count: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind}
        for key in ("position", "variable", "count"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["message"] = self.message
        return data


@dataclass
class Suggestion:
    kind: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.kind}
        out.update(self.data)
        out["message"] = self.message
        return out


@dataclass
class RemediationResult:
    fixed_code: str
    fixes_applied: list[FixRecord] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    timestamp: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fixedCode": self.fixed_code,
            "fixesApplied": [f.to_dict() for f in self.fixes_applied],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "timestamp": self.timestamp,
        }


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@dataclass
class HealthSummary:
    total_issues: int
    total_warnings: int
    execution_errors: int
    fixes_applied: int
    suggestions: int
    code_health: int
    issues_by_type: dict[str, int] = field(default_factory=dict)
    warnings_by_type: dict[str, int] = field(default_factory=dict)
    fixes_by_type: dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        analysis: AnalysisResult,
        execution: ExecutionTelemetry,
        remediation: RemediationResult,
        code_health: int,
    ) -> "HealthSummary":
        return cls(
            total_issues=len(analysis.issues),
            total_warnings=len(analysis.warnings),
            execution_errors=len(execution.execution_errors),
            fixes_applied=len(remediation.fixes_applied),
            suggestions=len(remediation.suggestions),
            code_health=code_health,
            issues_by_type=_group_by_kind(analysis.issues),
            warnings_by_type=_group_by_kind(analysis.warnings),
            fixes_by_type=_group_by_kind(remediation.fixes_applied),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalIssues": self.total_issues,
            "totalWarnings": self.total_warnings,
            "executionErrors": self.execution_errors,
            "fixesApplied": self.fixes_applied,
            "suggestions": self.suggestions,
            "codeHealth": self.code_health,
            "details": {
                "issuesByType": self.issues_by_type,
                "warningsByType": self.warnings_by_type,
                "fixesByType": self.fixes_by_type,
            },
        }


@dataclass
class DebugReport:
    file_name: str
    file_path: str
    analysis: AnalysisResult
    execution: ExecutionTelemetry
    remediation: RemediationResult
    summary: HealthSummary
    timestamp: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "filePath": self.file_path,
            "analysis": self.analysis.to_dict(),
            "execution": self.execution.to_dict(),
            "remediation": self.remediation.to_dict(),
            "summary": self.summary.to_dict(),
            "timestamp": self.timestamp,
        }


@dataclass
class FileErrorRecord:
    file_path: str
    error: str
    error_kind: str = "io"  # "io" | "pipeline"
    timestamp: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "error": self.error,
            "errorKind": self.error_kind,
            "timestamp": self.timestamp,
        }


FileOutcome = Union[DebugReport, FileErrorRecord]


@dataclass
class BatchSummary:
    total_files: int
    successful: int
    failed: int
    total_issues: int
    total_warnings: int
    total_execution_errors: int
    total_fixes: int
    code_health: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "successful": self.successful,
            "failed": self.failed,
            "totalIssues": self.total_issues,
            "totalWarnings": self.total_warnings,
            "totalExecutionErrors": self.total_execution_errors,
            "totalFixes": self.total_fixes,
            "codeHealth": self.code_health,
        }


@dataclass
class BatchReport:
    files: list[FileOutcome]
    summary: BatchSummary
    timestamp: str = field(default_factory=now_iso)

    @property
    def reports(self) -> list[DebugReport]:
        return [f for f in self.files if isinstance(f, DebugReport)]

    @property
    def errors(self) -> list[FileErrorRecord]:
        return [f for f in self.files if isinstance(f, FileErrorRecord)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [f.to_dict() for f in self.files],
            "summary": self.summary.to_dict(),
            "timestamp": self.timestamp,
        }
