"""Command-line interface for the S3 bucket tester.

Provides argument parsing and main entry point for running checks
from the command line.
"""

import argparse
import sys
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from s3tester import __version__
from s3tester.capabilities import FEATURE_ACL, FEATURE_POLICY
from s3tester.config import load_config, validate_config
from s3tester.errors import ConfigurationError
from s3tester.logging_config import configure_logging
from s3tester.providers import PROVIDER_TEMPLATES
from s3tester.reporters import ConsoleReporter, JsonReporter, Reporter
from s3tester.runner import CheckRunner


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_run_start(self, config, warnings: list[str]) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_start(config, warnings)

    def on_check_start(self, check_name: str) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_check_start(check_name)

    def on_check_complete(self, result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_check_complete(result)

    def on_run_complete(self, run_result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_complete(run_result)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Flags left unset parse to ``None`` so lower-priority sources
    (config file, environment) can supply them.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="s3tester",
        description="Test authentication against an S3-compatible bucket",
    )

    target = parser.add_argument_group("target")
    target.add_argument(
        "--endpoint",
        help="S3 endpoint URL or provider shortcut (see --list-providers)",
    )
    target.add_argument("--bucket", help="Bucket name")
    target.add_argument("--region", help="Signing region (default: us-east-1)")
    target.add_argument(
        "--port",
        type=int,
        help="Port to connect to (default: scheme default)",
    )

    auth = parser.add_argument_group("authentication")
    auth.add_argument("--access-key", help="Access key ID")
    auth.add_argument("--secret-key", help="Secret access key")
    auth.add_argument(
        "--auth-type",
        choices=["sigv4", "sigv2"],
        help="Signature version (default: sigv4)",
    )

    style = parser.add_mutually_exclusive_group()
    style.add_argument(
        "--virtual-hosted",
        action="store_true",
        default=None,
        help="Put the bucket in the host name (default)",
    )
    style.add_argument(
        "--path-style",
        action="store_true",
        default=None,
        help="Put the bucket in the URL path",
    )

    transport = parser.add_argument_group("transport")
    transport.add_argument(
        "--insecure",
        action="store_true",
        default=None,
        help="Use http:// for scheme-less endpoints and skip TLS verification",
    )
    transport.add_argument(
        "--timeout",
        type=int,
        help="Request timeout in seconds (default: 30)",
    )
    redirects = transport.add_mutually_exclusive_group()
    redirects.add_argument(
        "--follow-redirects",
        dest="follow_redirects",
        action="store_true",
        default=None,
        help="Follow HTTP redirects (default)",
    )
    redirects.add_argument(
        "--no-redirects",
        dest="follow_redirects",
        action="store_false",
        help="Do not follow HTTP redirects",
    )
    transport.add_argument(
        "--max-redirects",
        type=int,
        help="Maximum number of redirects to follow (default: 10)",
    )

    checks = parser.add_argument_group("checks")
    checks.add_argument(
        "--check-policy",
        action="store_true",
        help="Warn if the provider lacks full bucket policy support",
    )
    checks.add_argument(
        "--check-acl",
        action="store_true",
        help="Warn if the provider lacks full ACL support",
    )
    checks.add_argument(
        "--compare-sdk",
        action="store_true",
        default=None,
        help="Repeat the request through boto3 for comparison",
    )

    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Path to a JSON configuration file",
    )
    parser.add_argument(
        "-j", "--output-file",
        metavar="PATH",
        help="Write JSON results to file",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-check output, show only summary",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log resolved target, signing steps and HTTP exchange",
    )
    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="List provider shortcuts and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map parsed arguments onto config fields.

    Returns:
        Dict of config field -> value; ``None`` means not given.
    """
    features = []
    if args.check_policy:
        features.append(FEATURE_POLICY)
    if args.check_acl:
        features.append(FEATURE_ACL)

    return {
        "endpoint": args.endpoint,
        "bucket": args.bucket,
        "region": args.region,
        "access_key": args.access_key,
        "secret_key": args.secret_key,
        "auth_type": args.auth_type,
        "port": args.port,
        "insecure": args.insecure,
        "timeout": args.timeout,
        "follow_redirects": args.follow_redirects,
        "max_redirects": args.max_redirects,
        "virtual_hosted": args.virtual_hosted,
        "path_style": args.path_style,
        "features": features or None,
        "compare_sdk": args.compare_sdk,
    }


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = []

    # Always add console reporter
    reporters.append(ConsoleReporter(quiet=args.quiet))

    if args.output_file:
        reporters.append(JsonReporter(output_path=args.output_file))

    return reporters


def print_providers(console: Optional[Console] = None) -> None:
    """Print the provider shortcut table."""
    console = console or Console(legacy_windows=True)

    table = Table(
        title="Provider shortcuts",
        show_header=True,
        header_style="bold magenta",
        box=box.ASCII,
    )
    table.add_column("Shortcut", style="cyan", no_wrap=True)
    table.add_column("Endpoint template", no_wrap=True)
    table.add_column("Description")

    for shortcut, entry in PROVIDER_TEMPLATES.items():
        table.add_row(shortcut, entry["template"], entry["description"])

    console.print(table)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 if all checks passed, 1 for check failures,
        2 for configuration errors
    """
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    if args.list_providers:
        print_providers()
        return 0

    try:
        raw_config = load_config(args.config, build_overrides(args))
        config, warnings = validate_config(raw_config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    runner = CheckRunner(config, warnings=warnings, reporter=reporter)
    result = runner.run()

    return 0 if result.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
