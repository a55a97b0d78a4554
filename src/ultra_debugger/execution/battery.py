"""The fixed battery of synthetic test suites.

Each suite is described only by the shape of its inputs. The inputs are never
fed to the analyzed code; they exist so the telemetry can say what a real run
would have exercised.
"""

from dataclasses import dataclass
from typing import Any

MAX_SAFE_INTEGER = 2**53 - 1


@dataclass(frozen=True)
class SyntheticSuite:
    name: str
    description: str
    inputs: tuple[Any, ...]


TEST_BATTERY: tuple[SyntheticSuite, ...] = (
    SyntheticSuite(
        "Input validation test",
        "Testing with various input types",
        (None, "", 0, False, (), {}),
    ),
    SyntheticSuite(
        "Edge case test",
        "Testing with edge case values",
        (-1, 0, 1, MAX_SAFE_INTEGER, -MAX_SAFE_INTEGER),
    ),
    SyntheticSuite(
        "Error condition test",
        "Testing error handling",
        ("Error('Test error')", "invalid", "null"),
    ),
    SyntheticSuite(
        "String manipulation test",
        "Testing string operations",
        ("", "test", "a" * 100, "special chars: !@#$%^&*()"),
    ),
    SyntheticSuite(
        "Array operations test",
        "Testing array operations",
        ((), (1, 2, 3), (0,) * 100),
    ),
)
