"""Check runner and orchestrator.

Coordinates a run for one endpoint and bucket:
- Running the bucket authentication check
- Running the optional SDK reference check
- Reporter callbacks
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from s3tester.auth_check import AuthChecker
from s3tester.config import ResolvedConfig
from s3tester.models import CheckResult, ResultStatus
from s3tester.sdk_check import SdkChecker


@dataclass
class RunResult:
    """Result of running all checks."""

    config: ResolvedConfig
    results: list[CheckResult]
    total_duration: float
    warnings: list[str] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()))

    @property
    def all_passed(self) -> bool:
        """Check if every check passed."""
        return all(r.status == ResultStatus.PASS for r in self.results)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dict matching the JSON output schema
        """
        passed_count = sum(1 for r in self.results if r.status == ResultStatus.PASS)
        failed_count = sum(1 for r in self.results if r.status == ResultStatus.FAIL)
        error_count = sum(1 for r in self.results if r.status == ResultStatus.ERROR)

        return {
            "timestamp": self.timestamp,
            "config": self.config.to_dict(),
            "warnings": list(self.warnings),
            "results": [r.to_dict() for r in self.results],
            "duration_seconds": self.total_duration,
            "summary": {
                "total": len(self.results),
                "passed": passed_count,
                "failed": failed_count,
                "errors": error_count,
                "all_passed": self.all_passed,
            },
        }


class CheckRunner:
    """Runs the configured checks and reports progress.

    Args:
        config: Validated configuration
        warnings: Capability warnings from validation
        reporter: Optional reporter for progress callbacks
        checkers: Checkers to run instead of the defaults
    """

    def __init__(
        self,
        config: ResolvedConfig,
        warnings: Optional[list[str]] = None,
        reporter: Optional[Any] = None,
        checkers: Optional[list[Any]] = None,
    ):
        self.config = config
        self.warnings = warnings or []
        self.reporter = reporter
        self.checkers = checkers if checkers is not None else self._default_checkers()

    def _default_checkers(self) -> list[Any]:
        checkers: list[Any] = [AuthChecker(self.config)]
        if self.config.compare_sdk:
            checkers.append(SdkChecker(self.config))
        return checkers

    def run(self, timestamp: Optional[datetime] = None) -> RunResult:
        """Run all checks.

        Args:
            timestamp: Signing time passed to the authentication check.

        Returns:
            RunResult containing every check result
        """
        start_time = time.time()
        results: list[CheckResult] = []

        if self.reporter:
            self.reporter.on_run_start(self.config, self.warnings)

        for checker in self.checkers:
            if self.reporter:
                self.reporter.on_check_start(checker.name)

            result = checker.check(timestamp)

            results.append(result)

            if self.reporter:
                self.reporter.on_check_complete(result)

        run_result = RunResult(
            config=self.config,
            results=results,
            total_duration=time.time() - start_time,
            warnings=list(self.warnings),
        )

        if self.reporter:
            self.reporter.on_run_complete(run_result)

        return run_result
