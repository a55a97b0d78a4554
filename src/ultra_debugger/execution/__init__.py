"""Simulated execution: safety pre-check plus synthetic telemetry."""

from .battery import TEST_BATTERY, SyntheticSuite
from .harness import ExecutionHarness
from .memory import MemorySampler
from .safety import DANGEROUS_PATTERNS, find_violation

__all__ = [
    "ExecutionHarness",
    "MemorySampler",
    "SyntheticSuite",
    "TEST_BATTERY",
    "DANGEROUS_PATTERNS",
    "find_violation",
]
