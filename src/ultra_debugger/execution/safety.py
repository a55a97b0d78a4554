"""Deny-list of textual constructs the harness refuses to "run"."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DangerousPattern:
    label: str
    pattern: re.Pattern


DANGEROUS_PATTERNS: tuple[DangerousPattern, ...] = (
    DangerousPattern("module loading (require)", re.compile(r"require\s*\(")),
    DangerousPattern("module import", re.compile(r"import\s+")),
    DangerousPattern("process access", re.compile(r"process\s*\.")),
    DangerousPattern("dynamic evaluation (eval)", re.compile(r"eval\s*\(")),
    DangerousPattern("dynamic evaluation (Function)", re.compile(r"Function\s*\(")),
    DangerousPattern("command execution (exec)", re.compile(r"exec\s*\(")),
    DangerousPattern("subprocess spawning (spawn)", re.compile(r"spawn\s*\(")),
    DangerousPattern("subprocess spawning (fork)", re.compile(r"fork\s*\(")),
    DangerousPattern("child_process module", re.compile(r"child_process")),
    DangerousPattern("file system access", re.compile(r"\bfs\.")),
    DangerousPattern("path module access", re.compile(r"\bpath\.")),
)


@dataclass(frozen=True)
class SafetyViolation:
    label: str
    pattern: str
    offset: int

    @property
    def message(self) -> str:
        return f"Potentially dangerous code detected: {self.label}"

    @property
    def detail(self) -> str:
        return f"pattern /{self.pattern}/ matched at offset {self.offset}"


def find_violation(source: str) -> Optional[SafetyViolation]:
    """First deny-list match in list order, or None if the text is clean."""
    for entry in DANGEROUS_PATTERNS:
        match = entry.pattern.search(source)
        if match:
            return SafetyViolation(entry.label, entry.pattern.pattern, match.start())
    return None
