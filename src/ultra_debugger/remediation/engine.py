"""Remediation engine: textual annotations plus a few mechanical rewrites.

Pass order is fixed. Offset-keyed edits (unreachable-code annotations, then
accumulator initialization) run first, each through its own EditCursor. The
whole-buffer transforms follow: the error-handling wrap, then the leak header,
then the array-bounds header on top. Nothing after the cursor passes consumes
a recorded offset, so the wrap and the headers cannot shift a pending edit.
Every FixRecord position is an offset into the original source. Matches
inside strings or comments are never rewritten.

Inserted comments avoid the constructs the detectors look for (terminating
keywords, subscripts, timer calls, listener registration, request
construction), so re-analysing fixed code does not report the annotations.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Optional

from ..detection.patterns import MARKER, TRY_CATCH_RE, code_positions, line_indent
from ..logging_config import get_logger
from ..models import Finding, FixRecord, RemediationResult
from .cursor import EditCursor
from .suggestions import build_suggestions

logger = get_logger(__name__)

UNREACHABLE_NOTE = f"// {MARKER}: code after this statement is unreachable"

UNINITIALIZED_RE = re.compile(r"\b(let|var)\s+([A-Za-z_$][\w$]*)\s*;")

_LEAK_NOTES = (
    (
        "potential_event_listener_leak",
        "event_listener_leak_warning",
        "event listener leaks",
        "Ensure event listeners are properly removed to prevent memory leaks",
    ),
    (
        "potential_resource_leak",
        "resource_leak_warning",
        "resource leaks",
        "Ensure resources are properly released",
    ),
    (
        "potential_timer_leak",
        "timer_leak_warning",
        "timer leaks",
        "Ensure timers are properly cleared with clearTimeout/clearInterval",
    ),
)


def _count(findings: Sequence[Finding], kind: str) -> int:
    return sum(1 for f in findings if f.kind == kind)


def _header(count: int, what: str, todo: str) -> str:
    return f"// {MARKER}: Found {count} potential {what}\n// TODO: {todo}\n"


class RemediationEngine:
    """Turns findings into annotated source, fix records and suggestions."""

    def fix(
        self,
        source: str,
        issues: Sequence[Finding],
        warnings: Sequence[Finding],
    ) -> RemediationResult:
        if not issues and not warnings:
            return RemediationResult(fixed_code=source)

        fixes: list[FixRecord] = []
        annotated = self._annotation_cursor(source, issues, fixes)
        code = self.initialize_accumulators(annotated.text, fixes, origin=annotated)
        code = self.wrap_error_handling(code, warnings, fixes)
        code = self.add_leak_header(code, warnings, fixes)
        code = self.add_bounds_header(code, warnings, fixes)

        logger.debug("Applied %d fixes", len(fixes))
        return RemediationResult(
            fixed_code=code,
            fixes_applied=fixes,
            suggestions=build_suggestions(issues, warnings),
        )

    # -- offset-keyed passes --

    def annotate_unreachable(
        self, code: str, issues: Sequence[Finding], fixes: list[FixRecord]
    ) -> str:
        return self._annotation_cursor(code, issues, fixes).text

    def _annotation_cursor(
        self, code: str, issues: Sequence[Finding], fixes: list[FixRecord]
    ) -> EditCursor:
        cursor = EditCursor(code)
        targets = sorted(
            f.offset for f in issues if f.kind == "unreachable_code" and f.offset is not None
        )
        if targets:
            positions = code_positions(code)
            targets = [offset for offset in targets if offset in positions]
        for offset in dict.fromkeys(targets):
            cursor.insert(offset, f"{UNREACHABLE_NOTE}\n{line_indent(code, offset)}")
            fixes.append(
                FixRecord(
                    "unreachable_code_annotated",
                    f"Marked unreachable code after the statement at position {offset}",
                    position=offset,
                )
            )
        return cursor

    def initialize_accumulators(
        self, code: str, fixes: list[FixRecord], origin: Optional[EditCursor] = None
    ) -> str:
        """Rewrite ``let|var name;`` to ``name = 0`` when ``name +=`` comes next.

        ``origin`` is the cursor that produced ``code``; when given, recorded
        positions are mapped back into its original text.
        """
        positions = code_positions(code)
        cursor = EditCursor(code)
        for match in UNINITIALIZED_RE.finditer(code):
            if match.start() not in positions:
                continue
            keyword, name = match.group(1), match.group(2)
            use = re.compile(r"(?<![\w$.])" + re.escape(name) + r"(?![\w$])")
            next_use = next(
                (m for m in use.finditer(code, match.end()) if m.start() in positions), None
            )
            if next_use is None or not re.match(r"\s*\+=", code[next_use.end():]):
                continue
            cursor.replace(match.start(), match.end(), f"{keyword} {name} = 0;")
            position = match.start() if origin is None else origin.to_original(match.start())
            fixes.append(
                FixRecord(
                    "variable_initialization_fixed",
                    f"Initialized variable '{name}' to 0 before use with += operator",
                    position=position,
                    variable=name,
                )
            )
        return cursor.text

    # -- whole-buffer passes --

    def wrap_error_handling(
        self, code: str, warnings: Sequence[Finding], fixes: list[FixRecord]
    ) -> str:
        if not _count(warnings, "missing_error_handling") or TRY_CATCH_RE.search(code):
            return code

        body = "\n".join(f"  {line}" for line in code.split("\n"))
        fixes.append(
            FixRecord("error_handling_added", "Added try-catch wrapper for error handling")
        )
        return (
            f"// {MARKER}: Added error handling wrapper\n"
            f"try {{\n{body}\n}} catch (error) {{\n"
            f"  console.error('{MARKER}: Caught error:', error);\n"
            f"}}"
        )

    def add_leak_header(
        self, code: str, warnings: Sequence[Finding], fixes: list[FixRecord]
    ) -> str:
        block = ""
        for kind, fix_kind, what, todo in _LEAK_NOTES:
            count = _count(warnings, kind)
            if not count:
                continue
            block += _header(count, what, todo)
            fixes.append(
                FixRecord(
                    fix_kind,
                    f"Added warning comment for {count} potential {what}",
                    count=count,
                )
            )
        return block + code

    def add_bounds_header(
        self, code: str, warnings: Sequence[Finding], fixes: list[FixRecord]
    ) -> str:
        count = _count(warnings, "potential_array_index_oob")
        if not count:
            return code
        fixes.append(
            FixRecord(
                "array_bounds_warning",
                f"Added warning comment for {count} potential array index issues",
                count=count,
            )
        )
        return (
            _header(count, "array index out of bounds issues",
                    "Add proper bounds checking before array access")
            + code
        )
