"""Tests for the remediation engine and its edit cursor."""

from collections import Counter

import pytest

from ultra_debugger.detection import DetectorEngine
from ultra_debugger.models import Finding, Severity
from ultra_debugger.remediation import EditCursor, RemediationEngine, build_suggestions
from ultra_debugger.remediation.engine import UNREACHABLE_NOTE


def _warning(kind, offset=0, **extra):
    return Finding(kind, Severity.WARNING, offset, kind, extra)


def _issue(kind, offset=0, **extra):
    return Finding(kind, Severity.ISSUE, offset, kind, extra)


def _fix_kinds(result):
    return [f.kind for f in result.fixes_applied]


@pytest.fixture
def detector():
    return DetectorEngine()


@pytest.fixture
def engine():
    return RemediationEngine()


def _remediate(detector, engine, source):
    analysis = detector.analyze(source, "a.js")
    return analysis, engine.fix(source, analysis.issues, analysis.warnings)


# ---------------------------------------------------------------------------
# EditCursor
# ---------------------------------------------------------------------------


class TestEditCursor:
    def test_inserts_track_delta(self):
        cursor = EditCursor("abcdef")
        cursor.insert(1, "XX")
        assert cursor.effective(4) == 6
        cursor.insert(4, "Y")
        assert cursor.text == "aXXbcdYef"
        assert cursor.delta == 3

    def test_replace_shrinks(self):
        cursor = EditCursor("let s; s += 1;")
        cursor.replace(0, 6, "let s = 0;")
        cursor.replace(7, 8, "total")
        assert cursor.text == "let s = 0; total += 1;"

    def test_out_of_order_edit_rejected(self):
        cursor = EditCursor("abcdef")
        cursor.insert(3, "X")
        with pytest.raises(ValueError):
            cursor.insert(1, "Y")

    def test_range_past_end_rejected(self):
        with pytest.raises(ValueError):
            EditCursor("abc").replace(1, 10, "x")

    def test_untouched_text(self):
        assert EditCursor("abc").text == "abc"

    def test_to_original_maps_back_through_edits(self):
        cursor = EditCursor("abcdef")
        cursor.insert(1, "XX")
        cursor.replace(3, 5, "Y")
        assert cursor.text == "aXXbcYf"
        assert cursor.to_original(0) == 0
        assert cursor.to_original(3) == 1
        assert cursor.to_original(1) == 1
        assert cursor.to_original(5) == 3
        assert cursor.to_original(6) == 5


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


class TestRoundTrip:
    def test_no_findings_returns_source(self, engine):
        source = "let s;\nfor (;;) { s += 1; }\n"
        result = engine.fix(source, [], [])
        assert result.fixed_code == source
        assert result.fixes_applied == []
        assert result.suggestions == []

    def test_clean_source_through_detector(self, detector, engine, clean_source):
        _, result = _remediate(detector, engine, clean_source)
        assert result.fixed_code == clean_source
        assert result.fixes_applied == []


class TestAccumulator:
    def test_scenario(self, detector, engine, accumulator_source):
        _, result = _remediate(detector, engine, accumulator_source)
        fixes = [f for f in result.fixes_applied if f.kind == "variable_initialization_fixed"]
        assert len(fixes) == 1
        assert fixes[0].variable == "s"
        assert "let s = 0; for(let i=0;i<a.length;i++){ s += a[i]; }" in result.fixed_code

    def test_keyword_is_kept(self, engine):
        result = engine.fix("var total;\ntotal += 2;", [], [_warning("x")])
        assert result.fixed_code == "var total = 0;\ntotal += 2;"

    def test_other_first_use_is_left_alone(self, engine):
        source = "let s;\ns = 1;\ns += 2;"
        result = engine.fix(source, [], [_warning("x")])
        assert result.fixed_code == source
        assert result.fixes_applied == []

    def test_several_declarations(self, engine):
        source = "let a;\nlet b;\na += 1;\nb += 2;"
        result = engine.fix(source, [], [_warning("x")])
        assert result.fixed_code == "let a = 0;\nlet b = 0;\na += 1;\nb += 2;"
        assert [f.variable for f in result.fixes_applied] == ["a", "b"]

    def test_declaration_in_comment_is_left_alone(self, engine):
        source = "// let s;\ns += 2;"
        result = engine.fix(source, [], [_warning("x")])
        assert result.fixed_code == source
        assert result.fixes_applied == []

    def test_declaration_in_string_is_left_alone(self, engine):
        source = "const doc = 'let s;';\ns += 2;"
        result = engine.fix(source, [], [_warning("x")])
        assert result.fixed_code == source

    def test_use_in_comment_is_skipped(self, engine):
        source = "let s;\n// s += 1 later\ns = 4;"
        result = engine.fix(source, [], [_warning("x")])
        assert result.fixed_code == source

    def test_position_refers_to_original_source(self, detector, engine):
        source = "function f() {\n  return 1;\n  go();\n}\nlet s;\ns += 2;\n"
        _, result = _remediate(detector, engine, source)
        fix = next(f for f in result.fixes_applied if f.kind == "variable_initialization_fixed")
        assert fix.position == source.index("let s;")
        assert "let s = 0;" in result.fixed_code


class TestUnreachableAnnotation:
    def test_comment_inserted_before_return(self, detector, engine, unreachable_source):
        _, result = _remediate(detector, engine, unreachable_source)
        assert f"  {UNREACHABLE_NOTE}\n  return value;\n  cleanup();" in result.fixed_code
        fix = result.fixes_applied[0]
        assert fix.kind == "unreachable_code_annotated"
        assert fix.position == unreachable_source.index("return")

    def test_offsets_shift_left_to_right(self, detector, engine):
        source = (
            "function a() {\n  return 1;\n  one();\n}\n"
            "function b() {\n    return 2;\n    two();\n}\n"
        )
        analysis, result = _remediate(detector, engine, source)
        assert len(analysis.issues) == 2
        assert result.fixed_code.count(UNREACHABLE_NOTE) == 2
        assert f"  {UNREACHABLE_NOTE}\n  return 1;" in result.fixed_code
        assert f"    {UNREACHABLE_NOTE}\n    return 2;" in result.fixed_code
        assert [f.position for f in result.fixes_applied] == [
            f.offset for f in analysis.issues
        ]

    def test_return_in_comment_is_not_spliced(self, detector, engine):
        source = (
            "function double(x) {\n"
            "  // return the doubled value\n"
            "  const y = x * 2;\n"
            "  return y;\n"
            "}\n"
        )
        _, result = _remediate(detector, engine, source)
        assert UNREACHABLE_NOTE not in result.fixed_code
        assert "  // return the doubled value\n" in result.fixed_code

    def test_return_in_string_is_not_spliced(self, detector, engine):
        source = "function f() {\n  const msg = \"please return it; now\";\n  show(msg);\n}\n"
        _, result = _remediate(detector, engine, source)
        assert UNREACHABLE_NOTE not in result.fixed_code
        assert '"please return it; now"' in result.fixed_code

    def test_finding_inside_comment_is_ignored(self, engine):
        source = "// return x;\ngo();"
        result = engine.fix(source, [_issue("unreachable_code", 3)], [])
        assert UNREACHABLE_NOTE not in result.fixed_code
        assert "unreachable_code_annotated" not in _fix_kinds(result)


class TestErrorHandlingWrap:
    def test_wraps_whole_buffer(self, detector, engine):
        source = "fetch(url).then(r => r.json());"
        _, result = _remediate(detector, engine, source)
        assert "error_handling_added" in _fix_kinds(result)
        assert result.fixed_code.startswith(
            "// ULTRA-DEBUGGER: Added error handling wrapper\ntry {\n  fetch(url)"
        )
        assert result.fixed_code.endswith(
            "} catch (error) {\n  console.error('ULTRA-DEBUGGER: Caught error:', error);\n}"
        )

    def test_existing_try_catch_is_not_wrapped(self, engine):
        source = "try { go(); } catch (e) {}"
        result = engine.fix(source, [], [_warning("missing_error_handling", None)])
        assert result.fixed_code == source
        assert "error_handling_added" not in _fix_kinds(result)


class TestHeaders:
    def test_leak_block_order_and_counts(self, engine):
        warnings = [
            _warning("potential_timer_leak", 1),
            _warning("potential_event_listener_leak", 2),
            _warning("potential_resource_leak", 3),
            _warning("potential_event_listener_leak", 4),
        ]
        result = engine.fix("go();", [], warnings)
        lines = result.fixed_code.splitlines()
        assert lines[0] == "// ULTRA-DEBUGGER: Found 2 potential event listener leaks"
        assert lines[2] == "// ULTRA-DEBUGGER: Found 1 potential resource leaks"
        assert lines[4] == "// ULTRA-DEBUGGER: Found 1 potential timer leaks"
        assert lines[6] == "go();"
        assert [(f.kind, f.count) for f in result.fixes_applied] == [
            ("event_listener_leak_warning", 2),
            ("resource_leak_warning", 1),
            ("timer_leak_warning", 1),
        ]

    def test_bounds_block_sits_above_leak_block(self, engine):
        warnings = [
            _warning("potential_timer_leak", 1),
            _warning("potential_array_index_oob", 2),
        ]
        result = engine.fix("go();", [], warnings)
        lines = result.fixed_code.splitlines()
        assert lines[0] == (
            "// ULTRA-DEBUGGER: Found 1 potential array index out of bounds issues"
        )
        assert lines[2] == "// ULTRA-DEBUGGER: Found 1 potential timer leaks"
        assert _fix_kinds(result)[-1] == "array_bounds_warning"

    def test_pass_order(self, detector, engine):
        source = (
            "let n;\n"
            "async function load(list, k) {\n"
            "  setTimeout(tick, 5);\n"
            "  n += list[k];\n"
            "  return n;\n"
            "  done();\n"
            "}\n"
        )
        _, result = _remediate(detector, engine, source)
        assert _fix_kinds(result) == [
            "unreachable_code_annotated",
            "variable_initialization_fixed",
            "error_handling_added",
            "timer_leak_warning",
            "array_bounds_warning",
        ]
        assert result.fixed_code.index("array index") < result.fixed_code.index("timer leaks")
        assert result.fixed_code.index("timer leaks") < result.fixed_code.index("try {")


class TestIdempotence:
    def test_annotations_do_not_trigger_their_own_scans(self, detector, engine):
        source = (
            "function f(items, i) {\n"
            "  el.addEventListener('click', onClick);\n"
            "  const ws = new WebSocket(url);\n"
            "  setInterval(poll, 5);\n"
            "  return items[i];\n"
            "  done();\n"
            "}\n"
        )
        tracked = {
            "unreachable_code",
            "potential_array_index_oob",
            "potential_event_listener_leak",
            "potential_resource_leak",
            "potential_timer_leak",
        }
        before, result = _remediate(detector, engine, source)
        after = detector.analyze(result.fixed_code, "a.js")

        def counts(analysis):
            return Counter(
                f.kind for f in analysis.issues + analysis.warnings if f.kind in tracked
            )

        assert counts(after) == counts(before)
        assert counts(before)["unreachable_code"] == 1


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


class TestSuggestions:
    def test_all_kinds(self):
        warnings = [
            _warning("potential_undefined_variable", 5, variable="b"),
            _warning("potential_undefined_variable", 1, variable="a"),
            _warning("potential_undefined_variable", 9, variable="b"),
            _warning("potential_infinite_loop"),
            _warning("potential_infinite_loop"),
            _warning("function_complexity", function="big", lines=80),
        ]
        issues = [_issue("unreachable_code")]
        suggestions = build_suggestions(issues, warnings)
        data = [s.to_dict() for s in suggestions]
        assert [d["type"] for d in data] == [
            "undefined_variables",
            "infinite_loops",
            "function_complexity",
            "manual_review",
        ]
        assert data[0]["variables"] == ["b", "a"]
        assert data[1]["count"] == 2
        assert data[2]["functions"] == [{"name": "big", "lines": 80}]
        assert data[3]["issues"] == 1

    def test_no_findings_no_suggestions(self):
        assert build_suggestions([], []) == []

    def test_suggestions_never_touch_text(self, engine):
        source = "go();"
        result = engine.fix(source, [], [_warning("potential_infinite_loop")])
        assert result.fixed_code == source
        assert len(result.suggestions) == 1
