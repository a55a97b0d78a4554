"""Regex patterns and lexical helpers shared by the detectors.

Everything here is text-level: nothing parses the source into a tree. The
helpers only know enough about the script family to step over string
literals and comments while counting brackets.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Optional

# Marker prefixed to every comment the remediation engine writes.
MARKER = "ULTRA-DEBUGGER"

# ---------------------------------------------------------------------------
# Undeclared reference scan
# ---------------------------------------------------------------------------

DECLARATION_RE = re.compile(r"\b(?:let|const|var)\s+([A-Za-z_$][\w$]*)")
IDENTIFIER_RE = re.compile(r"(?<![\w$])[A-Za-z_$][\w$]*")

ALLOWED_IDENTIFIERS = frozenset({
    # keywords
    "async", "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "export", "extends",
    "finally", "for", "from", "function", "if", "import", "in", "instanceof",
    "let", "new", "of", "return", "static", "super", "switch", "this",
    "throw", "try", "typeof", "var", "void", "while", "with", "yield",
    # literals
    "true", "false", "null", "undefined", "NaN", "Infinity",
    # builtins
    "console", "log", "Array", "Boolean", "Date", "Error", "JSON", "Math",
    "Number", "Object", "Promise", "RegExp", "String", "Symbol", "Map", "Set",
    "parseInt", "parseFloat", "isNaN", "window", "document", "globalThis",
})

# ---------------------------------------------------------------------------
# Unreachable code scan
# ---------------------------------------------------------------------------

TERMINATOR_RE = re.compile(r"(?<![\w$.])(return|throw)(?![\w$])")

# A line ending in one of these continues the statement onto the next line.
CONTINUATION_CHARS = frozenset("+-*/%&|^!~?:=,.<>(")

COMMENT_RE = re.compile(r"//[^\n]*|/\*[\s\S]*?\*/")

# ---------------------------------------------------------------------------
# Loop, leak and error handling scans
# ---------------------------------------------------------------------------

INFINITE_LOOP_RE = re.compile(r"\bfor\s*\(\s*;\s*;\s*\)|\bwhile\s*\(\s*(?:true|1)\s*\)")

LISTENER_RE = re.compile(
    r"\baddEventListener\s*\(\s*['\"`]([\w:.-]+)['\"`]\s*,\s*"
    r"([A-Za-z_$][\w$.]*(?![\w$.]|\s*=>))?"
)
INLINE_HANDLER_WORDS = frozenset({"function", "async"})

REQUEST_RE = re.compile(r"\bnew\s+(XMLHttpRequest|WebSocket)\s*\(")
TIMER_RE = re.compile(r"\b(setInterval|setTimeout)\s*\(")

ASYNC_RES = (
    re.compile(r"\bfetch\s*\("),
    re.compile(r"\bnew\s+Promise\s*\("),
    re.compile(r"\basync\b"),
)
CATCH_RE = re.compile(r"\bcatch\s*[({]")
TRY_CATCH_RE = re.compile(r"\btry\s*\{[\s\S]*?\}\s*catch\b")

# ---------------------------------------------------------------------------
# Subscript and function scans
# ---------------------------------------------------------------------------

SUBSCRIPT_RE = re.compile(r"([A-Za-z_$][\w$]*)\[([^\[\]\n]+)\]")
INTEGER_LITERAL_RE = re.compile(r"^\d+$")

_RETURN_TYPE = r"(?:\s*:\s*[^{;=]+?)?"
FUNCTION_DECL_RE = re.compile(
    r"\bfunction\s*\*?\s*([A-Za-z_$][\w$]*)\s*\([^)]*\)" + _RETURN_TYPE + r"\s*\{"
)
FUNCTION_EXPR_RE = re.compile(
    r"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*=\s*(?:async\s+)?"
    r"(?:function\b\s*\*?\s*[\w$]*\s*\([^)]*\)|\([^)]*\)" + _RETURN_TYPE + r"\s*=>"
    r"|[A-Za-z_$][\w$]*\s*=>)\s*\{"
)


# ---------------------------------------------------------------------------
# Lexical helpers
# ---------------------------------------------------------------------------


def _skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal opening at ``start``."""
    quote = text[start]
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            return i  # unterminated literal ends at the line break
        i += 1
    return n


def iter_code(text: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """Yield ``(index, char)`` for characters outside strings and comments."""
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "'\"`":
            i = _skip_string(text, i)
            continue
        if ch == "/" and i + 1 < n:
            nxt = text[i + 1]
            if nxt == "/":
                end = text.find("\n", i)
                i = n if end == -1 else end
                continue
            if nxt == "*":
                end = text.find("*/", i + 2)
                i = n if end == -1 else end + 2
                continue
        yield i, ch
        i += 1


def code_positions(text: str) -> frozenset[int]:
    """Indexes of every character outside strings and comments."""
    return frozenset(i for i, _ in iter_code(text))


def find_block_close(text: str, start: int) -> Optional[int]:
    """Index of the ``}`` closing the block that encloses ``start``.

    Returns None when ``start`` is not inside any block.
    """
    depth = 0
    for i, ch in iter_code(text, start):
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                return i
            depth -= 1
    return None


def find_matching_brace(text: str, open_index: int) -> Optional[int]:
    """Index of the ``}`` matching the ``{`` at ``open_index``."""
    return find_block_close(text, open_index + 1)


def statement_end(text: str, start: int) -> int:
    """End of the statement whose body starts at ``start``.

    The statement ends after a ``;`` at bracket depth 0, at a line break that
    does not continue the expression, or right before the enclosing block's
    closing bracket.
    """
    depth = 0
    last_sig: Optional[str] = None
    for i, ch in iter_code(text, start):
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            if depth == 0:
                return i
            depth -= 1
        elif depth == 0 and ch == ";":
            return i + 1
        elif depth == 0 and ch == "\n":
            if last_sig is None or last_sig not in CONTINUATION_CHARS:
                return i
        if not ch.isspace():
            last_sig = ch
    return len(text)


def has_code(segment: str) -> bool:
    """True if ``segment`` holds anything besides whitespace and comments."""
    return bool(COMMENT_RE.sub("", segment).strip())


def line_indent(text: str, offset: int) -> str:
    """Leading whitespace of the line containing ``offset``."""
    line_start = text.rfind("\n", 0, offset) + 1
    indent_end = line_start
    while indent_end < len(text) and text[indent_end] in " \t":
        indent_end += 1
    return text[line_start:indent_end]
