"""Tests for the debug session tool surface."""

import json

import pytest

from ultra_debugger.session import NO_RESULT, TOOLS, DebugSession


@pytest.fixture
def session(make_controller):
    return DebugSession(make_controller())


class TestTools:
    def test_tool_names(self):
        assert [t["name"] for t in TOOLS] == [
            "debug_file",
            "debug_multiple_files",
            "get_last_debug_report",
            "get_fix_suggestions",
        ]

    def test_required_arguments(self):
        schemas = {t["name"]: t["inputSchema"] for t in DebugSession.list_tools()}
        assert schemas["debug_file"]["required"] == ["file_path"]
        assert schemas["debug_multiple_files"]["required"] == ["file_paths"]
        assert "required" not in schemas["get_last_debug_report"]


class TestCallTool:
    @pytest.mark.asyncio
    async def test_follow_ups_before_any_run(self, session):
        for name in ("get_last_debug_report", "get_fix_suggestions"):
            response = await session.call_tool(name, {})
            assert response.text == NO_RESULT
            assert not response.is_error

    @pytest.mark.asyncio
    async def test_debug_file(self, session, js_file):
        response = await session.call_tool("debug_file", {"file_path": str(js_file)})
        assert not response.is_error
        assert response.text.startswith(f"Debug completed for {js_file}. Found 1 issues")
        assert response.text.endswith("%")
        assert session.last_result is not None

        report = await session.call_tool("get_last_debug_report")
        assert json.loads(report.text)["fileName"] == "app.js"

        suggestions = json.loads((await session.call_tool("get_fix_suggestions")).text)
        assert {"undefined_variables", "manual_review"} <= {s["type"] for s in suggestions}

    @pytest.mark.asyncio
    async def test_batch_suggestions_carry_file(self, session, js_file, tmp_path):
        response = await session.call_tool(
            "debug_multiple_files", {"file_paths": [str(js_file), str(tmp_path / "gone.js")]}
        )
        assert not response.is_error
        assert "Successful: 1, Failed: 1" in response.text

        suggestions = json.loads((await session.call_tool("get_fix_suggestions")).text)
        assert suggestions
        assert {s["file"] for s in suggestions} == {"app.js"}

    @pytest.mark.asyncio
    async def test_missing_argument(self, session):
        response = await session.call_tool("debug_file", {})
        assert response.is_error
        assert "file_path is required" in response.text
        assert session.last_result is None

    @pytest.mark.asyncio
    async def test_bad_batch_argument(self, session):
        response = await session.call_tool("debug_multiple_files", {"file_paths": "a.js"})
        assert response.is_error
        assert "file_paths array is required" in response.text

    @pytest.mark.asyncio
    async def test_unknown_tool(self, session):
        response = await session.call_tool("format_disk", {})
        assert response.is_error
        assert response.text == "Error executing tool format_disk: Unknown tool: format_disk"

    @pytest.mark.asyncio
    async def test_io_failure_is_an_error_response(self, session, tmp_path):
        response = await session.call_tool("debug_file", {"file_path": str(tmp_path / "x.js")})
        assert response.is_error
        assert "Cannot access file" in response.text

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, make_controller, js_file):
        first = DebugSession(make_controller())
        second = DebugSession(make_controller())
        await first.call_tool("debug_file", {"file_path": str(js_file)})
        assert first.last_result is not None
        assert second.last_result is None
