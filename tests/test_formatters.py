"""Tests for the formatters package."""

import io
import json

import pytest
from rich.console import Console

from ultra_debugger.formatters import JsonFormatter, RichFormatter, get_formatter
from ultra_debugger.models import (
    AnalysisResult,
    BatchReport,
    BatchSummary,
    DebugReport,
    ExecutionError,
    ExecutionTelemetry,
    FileErrorRecord,
    Finding,
    FixRecord,
    HealthSummary,
    MemorySample,
    RemediationResult,
    Severity,
    Suggestion,
    TelemetryEvent,
)


def _make_report(file_name="app.js", errors=0):
    analysis = AnalysisResult(
        file_name=file_name,
        issues=[Finding("unreachable_code", Severity.ISSUE, 12, "Unreachable code", {"code": "x();"})],
        warnings=[Finding("missing_error_handling", Severity.WARNING, None, "No handling")],
    )
    execution = ExecutionTelemetry(
        file_name=file_name,
        test_results=[
            TelemetryEvent("test_suite_start", name="Edge case test"),
            TelemetryEvent("test_suite_complete", name="Edge case test", status="failed"),
        ],
        memory_usage=[MemorySample(timestamp=1, heap_used=2 * 1024 * 1024, heap_total=4)],
        execution_errors=[ExecutionError("execution_error", "boom") for _ in range(errors)],
    )
    remediation = RemediationResult(
        fixed_code="// fixed",
        fixes_applied=[FixRecord("error_handling_added", "Added try-catch wrapper")],
        suggestions=[Suggestion("manual_review", "Review it", {"issues": 1})],
    )
    summary = HealthSummary.build(analysis, execution, remediation, 81)
    return DebugReport(
        file_name=file_name,
        file_path=f"src/{file_name}",
        analysis=analysis,
        execution=execution,
        remediation=remediation,
        summary=summary,
    )


def _make_batch():
    files = [_make_report(), FileErrorRecord("gone.js", "Cannot access file: gone.js")]
    summary = BatchSummary(
        total_files=2,
        successful=1,
        failed=1,
        total_issues=1,
        total_warnings=1,
        total_execution_errors=0,
        total_fixes=1,
        code_health=81,
    )
    return BatchReport(files=files, summary=summary)


def _recording_formatter():
    buffer = io.StringIO()
    return RichFormatter(Console(file=buffer, width=120, color_system=None)), buffer


class TestGetFormatter:
    def test_known_formatters(self):
        assert isinstance(get_formatter("rich"), RichFormatter)
        assert isinstance(get_formatter("json"), JsonFormatter)

    def test_unknown_formatter(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestJsonFormatter:
    def test_single_report(self):
        data = json.loads(JsonFormatter().format(_make_report()))
        assert data["fileName"] == "app.js"
        assert data["analysis"]["issues"][0]["position"] == 12
        assert "position" not in data["analysis"]["warnings"][0]
        assert data["execution"]["memoryUsage"][0]["heapUsed"] == 2 * 1024 * 1024
        assert data["remediation"]["fixedCode"] == "// fixed"
        assert data["remediation"]["suggestions"][0] == {
            "type": "manual_review",
            "issues": 1,
            "message": "Review it",
        }
        assert data["summary"]["codeHealth"] == 81
        assert data["summary"]["details"]["fixesByType"] == {"error_handling_added": 1}

    def test_batch(self):
        data = json.loads(JsonFormatter().format(_make_batch()))
        assert data["summary"]["failed"] == 1
        assert data["files"][1]["error"].startswith("Cannot access file")

    def test_render_prints(self, capsys):
        JsonFormatter().render(_make_report())
        assert json.loads(capsys.readouterr().out)["fileName"] == "app.js"


class TestRichFormatter:
    def test_single_report(self):
        fmt, buffer = _recording_formatter()
        assert fmt.format(_make_report(errors=1)) == ""
        text = buffer.getvalue()
        assert "src/app.js" in text
        assert "81%" in text
        assert "unreachable_code" in text
        assert "synthetic telemetry" in text
        assert "Edge case test" in text
        assert "boom" in text
        assert "Added try-catch wrapper" in text

    def test_batch(self):
        fmt, buffer = _recording_formatter()
        fmt.render(_make_batch())
        text = buffer.getvalue()
        assert "gone.js" in text
        assert "io error" in text
        assert "Successful: 1" in text
