"""Tests for the strata command line entry point."""

from unittest.mock import patch

import pytest

from strata.cli.main import build_parser, main, run_command
from strata.config import Settings
from strata.core.errors import ExitCode
from strata.runtime.memory import InMemoryStackRuntime


@pytest.fixture
def cli_settings():
    return Settings(environment=None, regions=["us-east-1", "us-west-2"], log_json=False)


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("strata.cli.main.configure_logging"):
        yield


class TestParser:
    def test_positional_and_options(self):
        args = build_parser().parse_args(
            ["deploy", "dev", "--scope", "a,b", "--regions", "r1", "--runtime", "memory"]
        )

        assert args.action == "deploy"
        assert args.environment == "dev"
        assert args.scope == "a,b"
        assert args.regions == "r1"
        assert args.runtime == "memory"

    def test_environment_is_optional(self):
        args = build_parser().parse_args(["preview"])

        assert args.environment is None
        assert args.runtime == "pulumi"


class TestRunCommand:
    def test_deploy_with_memory_runtime_succeeds(self, cli_settings):
        code = run_command(["deploy", "dev", "--runtime", "memory"], settings=cli_settings)

        assert code == ExitCode.SUCCESS

    def test_unknown_action_fails_before_orchestration(self, cli_settings):
        with patch("strata.cli.main.Orchestrator") as mock_orchestrator:
            code = run_command(["apply", "dev", "--runtime", "memory"], settings=cli_settings)

        assert code == ExitCode.CONFIG_ERROR
        mock_orchestrator.assert_not_called()

    def test_missing_environment_fails(self, cli_settings):
        with patch("strata.cli.main.Orchestrator") as mock_orchestrator:
            code = run_command(["deploy", "--runtime", "memory"], settings=cli_settings)

        assert code == ExitCode.CONFIG_ERROR
        mock_orchestrator.assert_not_called()

    def test_environment_falls_back_to_settings(self):
        settings = Settings(environment="stg", regions=["r1"], log_json=False)
        runtime = InMemoryStackRuntime()

        with patch("strata.cli.main.create_runtime", return_value=runtime):
            code = run_command(["deploy"], settings=settings)

        assert code == ExitCode.SUCCESS
        assert "acct-baseline/stg" in runtime.stacks
        assert "workloads/r1-stg" in runtime.stacks

    def test_regions_and_scope_flags(self, cli_settings):
        runtime = InMemoryStackRuntime()

        with patch("strata.cli.main.create_runtime", return_value=runtime):
            code = run_command(
                ["preview", "dev", "--scope", "net-foundation", "--regions", "eu-west-1"],
                settings=cli_settings,
            )

        assert code == ExitCode.SUCCESS
        assert sorted(runtime.stacks) == ["net-foundation/eu-west-1-dev"]

    def test_default_regions_come_from_settings(self, cli_settings):
        runtime = InMemoryStackRuntime()

        with patch("strata.cli.main.create_runtime", return_value=runtime):
            run_command(["deploy", "dev", "--scope", "workloads"], settings=cli_settings)

        assert sorted(runtime.stacks) == [
            "workloads/us-east-1-dev",
            "workloads/us-west-2-dev",
        ]

    def test_stack_failure_returns_provider_error(self, cli_settings):
        runtime = InMemoryStackRuntime(fail={"acct-baseline/dev": "apply"})

        with patch("strata.cli.main.create_runtime", return_value=runtime):
            code = run_command(["deploy", "dev"], settings=cli_settings)

        assert code == ExitCode.PROVIDER_ERROR
        assert not any(name.startswith("net-foundation/") for _, name in runtime.events)

    def test_unknown_scope_layer_warns_and_continues(self, cli_settings):
        runtime = InMemoryStackRuntime()

        with patch("strata.cli.main.create_runtime", return_value=runtime), patch(
            "strata.cli.main.warning"
        ) as mock_warning:
            code = run_command(
                ["deploy", "dev", "--scope", "acct-baseline,bogus,also-bogus"],
                settings=cli_settings,
            )

        assert code == ExitCode.SUCCESS
        mock_warning.assert_called_once_with(
            "Unknown layers in scope, ignored: also-bogus, bogus"
        )
        assert sorted(runtime.stacks) == ["acct-baseline/dev"]

    def test_known_scope_does_not_warn(self, cli_settings):
        with patch("strata.cli.main.warning") as mock_warning:
            run_command(
                ["preview", "dev", "--scope", "workloads", "--runtime", "memory"],
                settings=cli_settings,
            )

        mock_warning.assert_not_called()

    def test_skipped_layers_are_reported(self, cli_settings):
        with patch("strata.cli.main.info") as mock_info:
            run_command(
                ["destroy", "dev", "--scope", "net-foundation,workloads", "--runtime", "memory"],
                settings=cli_settings,
            )

        mock_info.assert_called_once_with(
            "Skipped layers: svc-platform, stateful-data, acct-baseline"
        )

    def test_full_run_reports_no_skipped_layers(self, cli_settings):
        with patch("strata.cli.main.info") as mock_info:
            run_command(["deploy", "dev", "--runtime", "memory"], settings=cli_settings)

        mock_info.assert_not_called()


def test_main_exits_with_code(cli_settings):
    with patch("strata.cli.main.get_settings", return_value=cli_settings):
        with pytest.raises(SystemExit) as exc_info:
            main(["destroy", "dev", "--runtime", "memory"])

    assert exc_info.value.code == ExitCode.SUCCESS
