"""Builtin detector engine: pattern heuristics over raw source text.

The engine is a heuristic, not a type checker. Every pass works on the text
with regular expressions and bracket counting, so it over-reports in places a
real parser would not (shadowed names, identifiers inside strings). That
imprecision is accepted; the passes are cheap and never execute anything.
"""

from __future__ import annotations

from typing import Optional

from ..logging_config import get_logger
from ..models import AnalysisResult, Finding, Severity
from . import patterns as p

logger = get_logger(__name__)


def _issue(kind: str, offset: Optional[int], message: str, **extra) -> Finding:
    return Finding(kind=kind, severity=Severity.ISSUE, offset=offset, message=message, extra=extra)


def _warning(kind: str, offset: Optional[int], message: str, **extra) -> Finding:
    return Finding(
        kind=kind, severity=Severity.WARNING, offset=offset, message=message, extra=extra
    )


class DetectorEngine:
    """Runs the seven detection passes over one source text.

    Passes run in a fixed order and never short-circuit each other. Within a
    pass findings are appended in offset order, so the combined sequences are
    grouped by pass, then by offset.
    """

    def __init__(self, complexity_line_limit: int = 50, snippet_length: int = 50):
        self.complexity_line_limit = complexity_line_limit
        self.snippet_length = snippet_length

    def analyze(self, source: str, file_name: str) -> AnalysisResult:
        """Analyze ``source`` and return its issues and warnings."""
        findings: list[Finding] = []
        for check in (
            self.check_undeclared_references,
            self.check_unreachable_code,
            self.check_infinite_loops,
            self.check_resource_leaks,
            self.check_error_handling,
            self.check_array_index_access,
            self.check_function_complexity,
        ):
            findings.extend(check(source))

        result = AnalysisResult(
            file_name=file_name,
            issues=[f for f in findings if f.severity is Severity.ISSUE],
            warnings=[f for f in findings if f.severity is Severity.WARNING],
        )
        logger.debug(
            "%s: %d issues, %d warnings", file_name, len(result.issues), len(result.warnings)
        )
        return result

    # -- passes --

    def check_undeclared_references(self, source: str) -> list[Finding]:
        declared = {m.group(1) for m in p.DECLARATION_RE.finditer(source)}

        findings = []
        reported: set[str] = set()
        for match in p.IDENTIFIER_RE.finditer(source):
            name = match.group(0)
            if name in declared or name in p.ALLOWED_IDENTIFIERS or name in reported:
                continue
            reported.add(name)
            findings.append(
                _warning(
                    "potential_undefined_variable",
                    match.start(),
                    f"Variable '{name}' might be undefined",
                    variable=name,
                )
            )
        return findings

    def check_unreachable_code(self, source: str) -> list[Finding]:
        findings = []
        code = p.code_positions(source)
        for match in p.TERMINATOR_RE.finditer(source):
            if match.start() not in code:
                continue
            end = p.statement_end(source, match.end())
            close = p.find_block_close(source, end)
            if close is None:
                continue
            trailing = source[end:close]
            if not p.has_code(trailing):
                continue
            snippet = trailing.strip()[: self.snippet_length]
            findings.append(
                _issue(
                    "unreachable_code",
                    match.start(),
                    f"Unreachable code detected after '{match.group(1)}'",
                    code=snippet,
                )
            )
        return findings

    def check_infinite_loops(self, source: str) -> list[Finding]:
        return [
            _warning(
                "potential_infinite_loop",
                match.start(),
                "Potentially infinite loop detected",
                loop=match.group(0),
            )
            for match in p.INFINITE_LOOP_RE.finditer(source)
        ]

    def check_resource_leaks(self, source: str) -> list[Finding]:
        findings = []

        for match in p.LISTENER_RE.finditer(source):
            event = match.group(1)
            handler = match.group(2)
            if handler is None or handler in p.INLINE_HANDLER_WORDS:
                handler = "anonymous"
            findings.append(
                _warning(
                    "potential_event_listener_leak",
                    match.start(),
                    f"Event listener '{event}' may cause memory leaks if not properly removed",
                    event=event,
                    handler=handler,
                )
            )

        for match in p.REQUEST_RE.finditer(source):
            resource = match.group(1)
            findings.append(
                _warning(
                    "potential_resource_leak",
                    match.start(),
                    f"{resource} may cause resource leaks if not properly handled",
                    resource=resource,
                )
            )

        for match in p.TIMER_RE.finditer(source):
            timer = match.group(1)
            findings.append(
                _warning(
                    "potential_timer_leak",
                    match.start(),
                    f"{timer} may cause resource leaks if not properly cleared",
                    timer=timer,
                )
            )

        findings.sort(key=lambda f: f.offset)
        return findings

    def check_error_handling(self, source: str) -> list[Finding]:
        has_async = any(pattern.search(source) for pattern in p.ASYNC_RES)
        if not has_async:
            return []
        if p.CATCH_RE.search(source) or p.TRY_CATCH_RE.search(source):
            return []
        return [
            _warning(
                "missing_error_handling",
                None,
                "Asynchronous code detected without error handling",
            )
        ]

    def check_array_index_access(self, source: str) -> list[Finding]:
        findings = []
        for match in p.SUBSCRIPT_RE.finditer(source):
            array, index = match.group(1), match.group(2)
            if p.INTEGER_LITERAL_RE.match(index.strip()):
                continue
            findings.append(
                _warning(
                    "potential_array_index_oob",
                    match.start(),
                    f"Potential array index out of bounds for {array}[{index}]",
                    array=array,
                    index=index,
                )
            )
        return findings

    def check_function_complexity(self, source: str) -> list[Finding]:
        # keyed by the body's opening brace so `const f = function g() {` counts once
        headers: dict[int, tuple[int, str]] = {}
        for pattern in (p.FUNCTION_EXPR_RE, p.FUNCTION_DECL_RE):
            for match in pattern.finditer(source):
                brace = match.end() - 1
                if brace not in headers:
                    headers[brace] = (match.start(), match.group(1))

        findings = []
        for brace, (start, name) in sorted(headers.items(), key=lambda item: item[1][0]):
            close = p.find_matching_brace(source, brace)
            if close is None:
                continue
            lines = source[brace + 1 : close].count("\n") + 1
            if lines > self.complexity_line_limit:
                findings.append(
                    _warning(
                        "function_complexity",
                        start,
                        f"Function {name} is overly complex with {lines} lines",
                        function=name,
                        lines=lines,
                    )
                )
        return findings
