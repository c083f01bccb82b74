"""Tests for the check runner."""

from datetime import datetime, timezone
from unittest.mock import Mock, call

from s3tester.auth_check import AuthChecker
from s3tester.models import CheckResult, ResultStatus
from s3tester.reporters.base import Reporter
from s3tester.runner import CheckRunner, RunResult
from s3tester.sdk_check import SdkChecker

NEW_YEAR = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def fake_checker(name: str, status: ResultStatus) -> Mock:
    checker = Mock()
    checker.name = name
    checker.check.return_value = CheckResult(check_name=name, status=status)
    return checker


class TestDefaultCheckers:
    """Tests for checker selection."""

    def test_auth_check_only(self, make_config):
        runner = CheckRunner(make_config())

        assert len(runner.checkers) == 1
        assert isinstance(runner.checkers[0], AuthChecker)

    def test_sdk_check_added(self, make_config):
        runner = CheckRunner(make_config(compare_sdk=True))

        assert [type(c) for c in runner.checkers] == [AuthChecker, SdkChecker]


class TestCheckRunnerRun:
    """Tests for CheckRunner.run."""

    def test_runs_every_checker_with_timestamp(self, make_config):
        first = fake_checker("first", ResultStatus.PASS)
        second = fake_checker("second", ResultStatus.PASS)
        runner = CheckRunner(make_config(), checkers=[first, second])

        result = runner.run(NEW_YEAR)

        first.check.assert_called_once_with(NEW_YEAR)
        second.check.assert_called_once_with(NEW_YEAR)
        assert [r.check_name for r in result.results] == ["first", "second"]
        assert result.all_passed is True

    def test_failure_does_not_stop_run(self, make_config):
        failing = fake_checker("failing", ResultStatus.FAIL)
        passing = fake_checker("passing", ResultStatus.PASS)
        runner = CheckRunner(make_config(), checkers=[failing, passing])

        result = runner.run(NEW_YEAR)

        assert len(result.results) == 2
        assert result.all_passed is False

    def test_reporter_callbacks_in_order(self, make_config):
        config = make_config()
        reporter = Mock(spec=Reporter)
        checker = fake_checker("only", ResultStatus.PASS)
        runner = CheckRunner(config, warnings=["w"], reporter=reporter, checkers=[checker])

        result = runner.run(NEW_YEAR)

        assert reporter.mock_calls == [
            call.on_run_start(config, ["w"]),
            call.on_check_start("only"),
            call.on_check_complete(checker.check.return_value),
            call.on_run_complete(result),
        ]

    def test_warnings_kept_on_result(self, make_config):
        runner = CheckRunner(make_config(), warnings=["careful"], checkers=[])

        result = runner.run(NEW_YEAR)

        assert result.warnings == ["careful"]


class TestRunResult:
    """Tests for RunResult serialization."""

    def test_to_dict(self, make_config):
        result = RunResult(
            config=make_config(),
            results=[
                CheckResult("a", ResultStatus.PASS),
                CheckResult("b", ResultStatus.FAIL, error_message="HTTP 403:"),
                CheckResult("c", ResultStatus.ERROR),
            ],
            total_duration=1.5,
            warnings=["w"],
            timestamp="2024-01-01T00:00:00Z",
        )

        data = result.to_dict()

        assert data["timestamp"] == "2024-01-01T00:00:00Z"
        assert data["warnings"] == ["w"]
        assert data["duration_seconds"] == 1.5
        assert data["config"]["secret_key"] == "********"
        assert data["summary"] == {
            "total": 3,
            "passed": 1,
            "failed": 1,
            "errors": 1,
            "all_passed": False,
        }

    def test_empty_results_pass(self, make_config):
        result = RunResult(config=make_config(), results=[], total_duration=0.0)

        assert result.all_passed is True
