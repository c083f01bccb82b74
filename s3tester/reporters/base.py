"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3tester.config import ResolvedConfig
    from s3tester.models import CheckResult
    from s3tester.runner import RunResult


class Reporter(ABC):
    """Abstract base class for check result reporters."""

    @abstractmethod
    def on_run_start(self, config: "ResolvedConfig", warnings: list[str]) -> None:
        """Called once the configuration is validated, before any check."""
        pass

    @abstractmethod
    def on_check_start(self, check_name: str) -> None:
        """Called when a check starts."""
        pass

    @abstractmethod
    def on_check_complete(self, result: "CheckResult") -> None:
        """Called when a check completes."""
        pass

    @abstractmethod
    def on_run_complete(self, run_result: "RunResult") -> None:
        """Called when all checks are complete."""
        pass
