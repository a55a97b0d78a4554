"""Base formatter interface for Ultra Debugger output rendering."""

from abc import ABC, abstractmethod
from typing import Union

from ..models import BatchReport, DebugReport

Result = Union[DebugReport, BatchReport]


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: Result) -> None:
        """Render a single-file or batch result to stderr/stdout as appropriate."""

    @abstractmethod
    def format(self, result: Result) -> str:
        """Return formatted string representation of the result."""
