"""JSON reporter for structured output.

Writes the run report produced by ``RunResult.to_dict()``; the secret key
is masked there and never reaches the file.
"""

import json
from pathlib import Path
from typing import Optional

from s3tester.config import ResolvedConfig
from s3tester.models import CheckResult
from s3tester.reporters.base import Reporter
from s3tester.runner import RunResult


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path
        self.output: Optional[dict] = None

    def on_run_start(self, config: ResolvedConfig, warnings: list[str]) -> None:
        """No-op for JSON reporter."""
        pass

    def on_check_start(self, check_name: str) -> None:
        """No-op for JSON reporter."""
        pass

    def on_check_complete(self, result: CheckResult) -> None:
        """No-op - data comes from the run result."""
        pass

    def on_run_complete(self, run_result: RunResult) -> None:
        """Generates the report and writes it if a path was given."""
        self.output = run_result.to_dict()

        if self.output_path:
            self._write_to_file(self.output)

    def _write_to_file(self, output: dict) -> None:
        path = Path(self.output_path)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)
