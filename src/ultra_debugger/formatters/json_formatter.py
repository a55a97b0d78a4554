"""JSON formatter for Ultra Debugger."""

import json

from .base import BaseFormatter, Result


class JsonFormatter(BaseFormatter):
    """Render results as the JSON report document."""

    def render(self, result: Result) -> None:
        print(self.format(result))

    def format(self, result: Result) -> str:
        return json.dumps(result.to_dict(), indent=2)
