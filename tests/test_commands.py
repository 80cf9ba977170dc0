"""
Unit tests for command parsing and dispatch
"""
from unittest.mock import patch

import pytest

from mpi_cluster.controller import commands
from mpi_cluster.controller.commands import (
    COMMAND_HANDLERS,
    Command,
    dispatch,
    parse_worker_count,
)
from mpi_cluster.utils.exceptions import (
    DelegateFailureError,
    InvalidArgumentError,
    NodeNotFoundError,
)


class TestCommandParse:
    """Tests for Command.parse"""

    @pytest.mark.parametrize("text", ["", None, "help", "--help", "-h"])
    def test_help_aliases(self, text):
        assert Command.parse(text) is Command.HELP

    def test_hyphenated_keyword(self):
        assert Command.parse("ssh-test") is Command.SSH_TEST

    def test_unknown(self):
        with pytest.raises(InvalidArgumentError, match="Unknown command: deploy"):
            Command.parse("deploy")

    def test_every_command_has_handler(self):
        assert set(COMMAND_HANDLERS) == set(Command)


class TestParseWorkerCount:
    """Tests for parse_worker_count"""

    def test_default(self):
        assert parse_worker_count(None, 3) == 3

    def test_zero(self):
        assert parse_worker_count("0", 3) == 0

    def test_value(self):
        assert parse_worker_count("12", 3) == 12

    @pytest.mark.parametrize("value", ["-1", "two", "1.5", "", " 2"])
    def test_invalid(self, value):
        with pytest.raises(InvalidArgumentError):
            parse_worker_count(value, 3)


class TestDispatch:
    """Tests for dispatch and the lifecycle handlers"""

    def test_up_scales_workers(self, settings):
        with patch.object(commands, "compose_up") as mock_up, patch.object(
            commands, "compose_ps"
        ) as mock_ps:
            assert dispatch(Command.UP, "5", settings) == 0
        mock_up.assert_called_once_with(settings, 5)
        mock_ps.assert_called_once_with(settings)

    def test_scale_default(self, settings):
        with patch.object(commands, "compose_up") as mock_up, patch.object(
            commands, "compose_ps"
        ):
            dispatch(Command.SCALE, None, settings)
        mock_up.assert_called_once_with(settings, 3)

    def test_invalid_count_rejected_before_delegation(self, settings):
        with patch.object(commands, "compose_up") as mock_up:
            with pytest.raises(InvalidArgumentError):
                dispatch(Command.UP, "many", settings)
        mock_up.assert_not_called()

    def test_argument_rejected_for_ps(self, settings):
        with patch.object(commands, "compose_ps") as mock_ps:
            with pytest.raises(InvalidArgumentError):
                dispatch(Command.PS, "extra", settings)
        mock_ps.assert_not_called()

    def test_down(self, settings):
        with patch.object(commands, "compose_down") as mock_down:
            dispatch(Command.DOWN, None, settings)
        mock_down.assert_called_once_with(settings)

    def test_clean_purges(self, settings):
        with patch.object(commands, "compose_down") as mock_down:
            dispatch(Command.CLEAN, None, settings)
        mock_down.assert_called_once_with(settings, purge=True)

    def test_build(self, settings):
        with patch.object(commands, "build_image") as mock_build:
            dispatch(Command.BUILD, None, settings)
        mock_build.assert_called_once_with(settings)

    def test_delegate_failure_propagates(self, settings):
        with patch.object(
            commands, "compose_down", side_effect=DelegateFailureError(["docker-compose"], 4)
        ):
            with pytest.raises(DelegateFailureError) as exc_info:
                dispatch(Command.DOWN, None, settings)
        assert exc_info.value.exit_code == 4

    def test_exec_defaults_to_master(self, settings):
        with patch.object(commands, "exec_shell") as mock_shell:
            dispatch(Command.EXEC, None, settings)
        mock_shell.assert_called_once_with(settings, "mpi-master")

    def test_exec_resolves_worker(self, settings, lister):
        with patch(
            "mpi_cluster.core.resolver.list_running_names", side_effect=lister
        ), patch.object(commands, "exec_shell") as mock_shell:
            dispatch(Command.EXEC, "worker-2", settings)
        mock_shell.assert_called_once_with(settings, "mpi_cluster-mpi-worker-2")

    def test_logs_node_not_found(self, settings, lister):
        with patch(
            "mpi_cluster.core.resolver.list_running_names", side_effect=lister
        ), patch.object(commands, "node_logs") as mock_logs:
            with pytest.raises(NodeNotFoundError):
                dispatch(Command.LOGS, "worker-9", settings)
        mock_logs.assert_not_called()

    def test_logs_plain_name(self, settings):
        with patch.object(commands, "node_logs") as mock_logs:
            dispatch(Command.LOGS, "worker_custom", settings)
        mock_logs.assert_called_once_with(settings, "mpi-worker_custom")

    def test_hostfile(self, settings, lister, capsys):
        with patch("mpi_cluster.controller.smoke.list_running_names", side_effect=lister):
            dispatch(Command.HOSTFILE, None, settings)
        out = capsys.readouterr().out
        assert "mpi-master slots=1" in out
        assert settings.hostfile_path.exists()

    def test_ssh_test_exits_zero_with_failures(self, settings):
        with patch.object(commands, "run_ssh_test") as mock_test:
            mock_test.return_value.passed = []
            mock_test.return_value.failed = ["mpi-worker-1"]
            assert dispatch(Command.SSH_TEST, None, settings) == 0

    def test_help(self, settings, capsys):
        assert dispatch(Command.HELP, None, settings) == 0
        assert "Usage:" in capsys.readouterr().out
