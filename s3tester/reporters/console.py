"""Console reporter using Rich library for formatted CLI output.

Provides colorful, formatted output during a run including:
- Configuration summary and capability warnings
- Per-check results with pass/fail indicators
- Final summary table
"""

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from s3tester.config import ResolvedConfig
from s3tester.models import CheckResult, ResultStatus
from s3tester.reporters.base import Reporter
from s3tester.runner import RunResult

STATUS_MARKUP = {
    ResultStatus.PASS: "[green]PASS[/green]",
    ResultStatus.FAIL: "[red]FAIL[/red]",
    ResultStatus.ERROR: "[yellow]ERROR[/yellow]",
}


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress per-check output (only show summary)
    """

    def __init__(self, quiet: bool = False):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = Console(legacy_windows=True)
        self.quiet = quiet

    def on_run_start(self, config: ResolvedConfig, warnings: list[str]) -> None:
        """Displays the target and any capability warnings."""
        if not self.quiet:
            self.console.print(
                Rule("[bold cyan]S3 Bucket Tester[/bold cyan]", style="cyan", characters="-")
            )
            self.console.print(f"Endpoint:  {config.target.url}", markup=False)
            self.console.print(f"Bucket:    {config.bucket}", markup=False)
            self.console.print(f"Region:    {config.region}", markup=False)
            self.console.print(f"Provider:  {config.provider.name}", markup=False)
            self.console.print(
                f"Auth:      {config.auth_type.value.upper()}, {config.style.value} addressing",
                markup=False,
            )

        for warning in warnings:
            self.console.print()
            self.console.print(warning, style="yellow", markup=False)

    def on_check_start(self, check_name: str) -> None:
        """Currently a no-op for console reporter."""
        pass

    def on_check_complete(self, result: CheckResult) -> None:
        """Displays pass/fail indicator with check details."""
        if self.quiet:
            return

        self.console.print()
        self.console.print(f"  [{STATUS_MARKUP[result.status]}]: {result.check_name}")

        details = result.details
        if details is not None:
            self.console.print(
                f"     [dim]HTTP {details.status_code} in {details.response_time_ms}ms, "
                f"server: {details.provider}[/dim]"
            )
            self.console.print(
                f"     [dim]bucket exists: {details.bucket_exists}, "
                f"access granted: {details.access_granted}[/dim]"
            )

        if result.error_message and result.status != ResultStatus.PASS:
            self.console.print(f"     {result.error_message}", style="dim", markup=False)

    def on_run_complete(self, run_result: RunResult) -> None:
        """Displays a summary table of all checks."""
        if not run_result.results:
            self.console.print("[yellow]No results to display.[/yellow]")
            return

        self.console.print()
        self.console.print(
            Rule("[bold]Summary[/bold]", style="magenta", characters="-")
        )

        # Create summary table with ASCII-safe box drawing
        table = Table(
            title="",
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center", no_wrap=True)
        table.add_column("Duration", justify="right", no_wrap=True)

        for result in run_result.results:
            table.add_row(
                result.check_name,
                STATUS_MARKUP[result.status],
                f"{result.duration_seconds:.2f}s",
            )

        self.console.print(table)

        if run_result.all_passed:
            self.console.print("[bold green]All checks passed[/bold green]")
        else:
            self.console.print("[bold red]One or more checks failed[/bold red]")
        self.console.print()
