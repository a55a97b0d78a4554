"""Optional ESLint-backed detector.

ESLint is a Node tool, so it runs as a subprocess that reads the source on
stdin and prints JSON. Any failure raises LinterUnavailableError; the
controller treats that as a signal to fall back to the builtin engine.
"""

from __future__ import annotations

import json
import subprocess
from enum import Enum
from pathlib import PurePath
from typing import Any, Optional, Sequence

from ..exceptions import LinterUnavailableError
from ..logging_config import get_logger
from ..models import AnalysisResult, Finding, Severity

logger = get_logger(__name__)


class Dialect(Enum):
    SCRIPT = "script"  # .js .mjs .cjs
    TYPED = "typed"  # .ts .mts .cts
    MARKUP = "markup"  # .jsx .tsx


_EXTENSION_DIALECTS = {
    ".js": Dialect.SCRIPT,
    ".mjs": Dialect.SCRIPT,
    ".cjs": Dialect.SCRIPT,
    ".ts": Dialect.TYPED,
    ".mts": Dialect.TYPED,
    ".cts": Dialect.TYPED,
    ".jsx": Dialect.MARKUP,
    ".tsx": Dialect.MARKUP,
}

# rule id -> severity
BASE_RULES: dict[str, str] = {
    "no-undef": "error",
    "no-unreachable": "error",
    "no-unused-vars": "warn",
    "no-constant-condition": "warn",
    "no-dupe-keys": "error",
    "no-extra-semi": "warn",
    "no-debugger": "warn",
    "no-dupe-args": "error",
    "no-empty": "warn",
    "no-invalid-regexp": "error",
    "no-sparse-arrays": "warn",
    "no-unsafe-negation": "error",
}

# Typed sources get name resolution from their compiler; markup sources use
# identifiers that only exist after the JSX transform.
_DIALECT_OVERRIDES: dict[Dialect, dict[str, str]] = {
    Dialect.SCRIPT: {},
    Dialect.TYPED: {"no-undef": "off", "no-dupe-args": "off"},
    Dialect.MARKUP: {"no-unused-vars": "off"},
}

# ESLint exits 1 when it found problems and 2 on a fatal error.
_FATAL_EXIT = 2


def detect_dialect(file_name: str) -> Dialect:
    return _EXTENSION_DIALECTS.get(PurePath(file_name).suffix.lower(), Dialect.SCRIPT)


def rules_for(dialect: Dialect) -> dict[str, str]:
    rules = dict(BASE_RULES)
    rules.update(_DIALECT_OVERRIDES[dialect])
    return rules


def line_column_to_offset(source: str, line: Optional[int], column: Optional[int]) -> int:
    """Convert ESLint's 1-based line/column into a character offset."""
    if not line or line < 1:
        return 0
    offset = 0
    for _ in range(line - 1):
        nl = source.find("\n", offset)
        if nl == -1:
            return len(source)
        offset = nl + 1
    return min(offset + max((column or 1) - 1, 0), len(source))


class EslintEngine:
    """Detector that delegates to an ESLint executable."""

    def __init__(self, command: Sequence[str], timeout_seconds: int = 30):
        self.command = list(command)
        self.timeout_seconds = timeout_seconds

    def build_command(self, file_name: str) -> list[str]:
        cmd = self.command + ["--format", "json", "--stdin", "--stdin-filename", file_name]
        for rule_id, level in rules_for(detect_dialect(file_name)).items():
            cmd.extend(["--rule", f"{rule_id}: {level}"])
        return cmd

    def analyze(self, source: str, file_name: str) -> AnalysisResult:
        """Lint ``source`` and convert ESLint messages into findings.

        Raises:
            LinterUnavailableError: If ESLint is missing, times out, crashes
                or prints something other than its JSON report
        """
        cmd = self.build_command(file_name)
        logger.debug("Running external linter: %s", " ".join(cmd[:3]))
        try:
            proc = subprocess.run(
                cmd,
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise LinterUnavailableError(f"executable not found: {e}")
        except subprocess.TimeoutExpired:
            raise LinterUnavailableError(f"timed out after {self.timeout_seconds}s")
        except OSError as e:
            raise LinterUnavailableError(f"could not start: {e}")

        if proc.returncode >= _FATAL_EXIT:
            reason = proc.stderr.strip().splitlines()[-1] if proc.stderr.strip() else "no output"
            raise LinterUnavailableError(f"exit code {proc.returncode}: {reason}")

        try:
            lint_results = json.loads(proc.stdout)
        except json.JSONDecodeError as e:
            raise LinterUnavailableError(f"unreadable report: {e}")
        if not isinstance(lint_results, list):
            raise LinterUnavailableError("report is not a list of results")

        return self.to_analysis(source, file_name, lint_results)

    def to_analysis(
        self, source: str, file_name: str, lint_results: list[dict[str, Any]]
    ) -> AnalysisResult:
        try:
            issues, warnings = self._convert(source, lint_results)
        except (AttributeError, TypeError, ValueError) as e:
            raise LinterUnavailableError(f"malformed report: {type(e).__name__}: {e}")

        return AnalysisResult(
            file_name=file_name,
            issues=issues,
            warnings=warnings,
            engine="eslint",
            lint_results=lint_results,
        )

    def _convert(
        self, source: str, lint_results: list[dict[str, Any]]
    ) -> tuple[list[Finding], list[Finding]]:
        issues: list[Finding] = []
        warnings: list[Finding] = []
        for result in lint_results:
            for msg in result.get("messages", []):
                rule_id = msg.get("ruleId")
                finding = Finding(
                    kind=rule_id or "parse_error",
                    severity=Severity.ISSUE if msg.get("severity") == 2 else Severity.WARNING,
                    offset=line_column_to_offset(source, msg.get("line"), msg.get("column")),
                    message=msg.get("message", ""),
                    extra={
                        "rule_id": rule_id,
                        "line": msg.get("line"),
                        "column": msg.get("column"),
                    },
                )
                (issues if finding.severity is Severity.ISSUE else warnings).append(finding)

        issues.sort(key=lambda f: f.offset)
        warnings.sort(key=lambda f: f.offset)
        return issues, warnings
