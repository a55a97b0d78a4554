"""Debug session and tool surface.

A DebugSession owns the result of its most recent debug operation so that
follow-up questions ("show the last report", "what should I fix") are
answered from explicit state instead of a process-wide global. The tool
layer is transport-agnostic: ``call_tool`` takes a tool name and an argument
mapping and returns text, which any RPC framing can wrap.

Example:
    >>> session = DebugSession(DebugController(load_config(save_report=False)))
    >>> response = await session.call_tool("debug_file", {"file_path": "app.js"})
    >>> response.text
    'Debug completed for app.js. Found 1 issues and 4 warnings. Code health: 83%'
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from .controller import DebugController
from .logging_config import get_logger
from .models import BatchReport, DebugReport

logger = get_logger(__name__)

NO_RESULT = "No debug operation has been performed yet."

TOOLS: list[dict[str, Any]] = [
    {
        "name": "debug_file",
        "description": "Debug an AI-generated JavaScript file for potential issues",
        "inputSchema": {
            "type": "object",
            "properties": {
                "file_path": {
                    "type": "string",
                    "description": "Path to the JavaScript file to debug",
                }
            },
            "required": ["file_path"],
        },
    },
    {
        "name": "debug_multiple_files",
        "description": "Debug multiple AI-generated JavaScript files for potential issues",
        "inputSchema": {
            "type": "object",
            "properties": {
                "file_paths": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of paths to JavaScript files to debug",
                }
            },
            "required": ["file_paths"],
        },
    },
    {
        "name": "get_last_debug_report",
        "description": "Get the detailed report from the last debug operation",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "get_fix_suggestions",
        "description": "Get suggestions for fixing issues found in the last debug operation",
        "inputSchema": {"type": "object", "properties": {}},
    },
]


@dataclass(frozen=True)
class ToolResponse:
    text: str
    is_error: bool = False


class DebugSession:
    """Holds one controller and the last result it produced."""

    def __init__(self, controller: DebugController):
        self.controller = controller
        self.last_result: Optional[Union[DebugReport, BatchReport]] = None

    @staticmethod
    def list_tools() -> list[dict[str, Any]]:
        return TOOLS

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> ToolResponse:
        """Run a tool. Failures come back as ``is_error`` responses."""
        arguments = arguments or {}
        handlers = {
            "debug_file": self._debug_file,
            "debug_multiple_files": self._debug_multiple_files,
            "get_last_debug_report": self._last_report,
            "get_fix_suggestions": self._fix_suggestions,
        }
        try:
            handler = handlers.get(name)
            if handler is None:
                raise ValueError(f"Unknown tool: {name}")
            return ToolResponse(await handler(arguments))
        except Exception as e:
            logger.debug(f"Tool {name} failed", exc_info=True)
            return ToolResponse(f"Error executing tool {name}: {e}", is_error=True)

    async def _debug_file(self, arguments: dict[str, Any]) -> str:
        file_path = arguments.get("file_path")
        if not isinstance(file_path, str) or not file_path:
            raise ValueError("file_path is required")

        report = await self.controller.debug_one(file_path)
        self.last_result = report
        s = report.summary
        return (
            f"Debug completed for {file_path}. Found {s.total_issues} issues and "
            f"{s.total_warnings} warnings. Code health: {s.code_health}%"
        )

    async def _debug_multiple_files(self, arguments: dict[str, Any]) -> str:
        file_paths = arguments.get("file_paths")
        if not isinstance(file_paths, list) or not all(isinstance(p, str) for p in file_paths):
            raise ValueError("file_paths array is required")

        batch = await self.controller.debug_many(file_paths)
        self.last_result = batch
        s = batch.summary
        return (
            f"Multi-file debug completed for {len(file_paths)} files. "
            f"Successful: {s.successful}, Failed: {s.failed}. "
            f"Overall code health: {s.code_health}%"
        )

    async def _last_report(self, arguments: dict[str, Any]) -> str:
        if self.last_result is None:
            return NO_RESULT
        return json.dumps(self.last_result.to_dict(), indent=2)

    async def _fix_suggestions(self, arguments: dict[str, Any]) -> str:
        if self.last_result is None:
            return NO_RESULT

        if isinstance(self.last_result, DebugReport):
            suggestions = [s.to_dict() for s in self.last_result.remediation.suggestions]
        else:
            suggestions = [
                {"file": report.file_name, **s.to_dict()}
                for report in self.last_result.reports
                for s in report.remediation.suggestions
            ]
        return json.dumps(suggestions, indent=2)
