"""Advisory suggestions derived from findings. Never touches the text."""

from __future__ import annotations

from collections.abc import Sequence

from ..models import Finding, Suggestion


def _of_kind(findings: Sequence[Finding], kind: str) -> list[Finding]:
    return [f for f in findings if f.kind == kind]


def build_suggestions(issues: Sequence[Finding], warnings: Sequence[Finding]) -> list[Suggestion]:
    suggestions = []

    undefined = _of_kind(warnings, "potential_undefined_variable")
    if undefined:
        # dict keeps first-appearance order
        names = list(dict.fromkeys(f.get("variable") for f in undefined))
        suggestions.append(
            Suggestion(
                "undefined_variables",
                "Consider declaring these variables or checking if they exist before use",
                {"variables": names},
            )
        )

    loops = _of_kind(warnings, "potential_infinite_loop")
    if loops:
        suggestions.append(
            Suggestion(
                "infinite_loops",
                "Add proper exit conditions to prevent infinite loops",
                {"count": len(loops)},
            )
        )

    complex_functions = _of_kind(warnings, "function_complexity")
    if complex_functions:
        suggestions.append(
            Suggestion(
                "function_complexity",
                "Consider refactoring these complex functions into smaller, "
                "more manageable pieces",
                {
                    "functions": [
                        {"name": f.get("function"), "lines": f.get("lines")}
                        for f in complex_functions
                    ]
                },
            )
        )

    if issues:
        suggestions.append(
            Suggestion(
                "manual_review",
                "Manual code review recommended for the identified critical issues",
                {"issues": len(issues)},
            )
        )

    return suggestions
