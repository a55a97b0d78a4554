"""
Ultra Debugger - heuristic debugging for AI-generated JavaScript

Scans source text for common defects, fabricates clearly-labelled execution
telemetry without ever running the code, applies textual fixes and scores
overall code health.
"""

__version__ = "1.0.0"

from .config import DebuggerConfig, load_config
from .controller import DebugController, calculate_code_health
from .detection import DetectorEngine
from .execution import ExecutionHarness
from .models import BatchReport, DebugReport, Finding
from .remediation import RemediationEngine
from .session import DebugSession

__all__ = [
    "DebugController",  # Main entry point
    "DebugSession",
    "DebuggerConfig",
    "load_config",
    "DetectorEngine",
    "ExecutionHarness",
    "RemediationEngine",
    "calculate_code_health",
    "DebugReport",
    "BatchReport",
    "Finding",
]
