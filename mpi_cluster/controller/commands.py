"""
Command keywords and their lifecycle handlers.

Each keyword maps to exactly one handler in COMMAND_HANDLERS. A handler
either returns normally (exit code 0) or raises a ClusterError whose
exit_code becomes the process exit status.
"""

from collections.abc import Callable
from enum import Enum

from ..core.engine import (
    build_image,
    compose_down,
    compose_ps,
    compose_up,
    exec_shell,
    node_logs,
)
from ..core.resolver import resolve_node_reference
from ..utils.config import ClusterSettings
from ..utils.exceptions import InvalidArgumentError
from ..utils.logging import get_logger, status, success, warning
from .smoke import publish_hostfile, run_mpi_test, run_ssh_test

logger = get_logger(__name__)


class Command(Enum):
    """Controller commands."""

    BUILD = "build"
    UP = "up"
    DOWN = "down"
    SCALE = "scale"
    EXEC = "exec"
    LOGS = "logs"
    PS = "ps"
    CLEAN = "clean"
    HOSTFILE = "hostfile"
    TEST = "test"
    SSH_TEST = "ssh-test"
    HELP = "help"

    @classmethod
    def parse(cls, text: str | None) -> "Command":
        if text in (None, "", "--help", "-h"):
            return cls.HELP
        try:
            return cls(text)
        except ValueError:
            raise InvalidArgumentError(f"Unknown command: {text}")


ARGUMENT_COMMANDS = {Command.UP, Command.SCALE, Command.EXEC, Command.LOGS, Command.HELP}


def parse_worker_count(value: str | None, default: int) -> int:
    """Worker count from a CLI argument; must be a non-negative integer."""
    if value is None:
        return default
    if not (value.isascii() and value.isdigit()):
        raise InvalidArgumentError(
            f"Invalid worker count '{value}': expected a non-negative integer"
        )
    return int(value)


def usage_text(program: str = "mpi-cluster") -> str:
    return f"""Usage: {program} [command] [options]

Commands:
  build             Build the MPI container image
  up [workers]      Start cluster with specified number of workers (default: 3)
  down              Stop and remove all containers
  scale [workers]   Scale cluster to specified number of workers
  exec [container]  Execute bash in specified container (default: mpi-master)
                    Use 'master', 'worker', 'worker-1', 'worker-2', etc.
  logs [container]  Show logs for specified container
  ps                Show running containers
  clean             Remove all containers and images
  hostfile          Generate MPI hostfile
  test              Run MPI test (single and multi-container)
  ssh-test          Test SSH connectivity between containers

Examples:
  {program} up 5           Start cluster with 5 worker nodes
  {program} exec worker    Shell into first worker node
  {program} exec worker-2  Shell into second worker node
  {program} test           Run MPI hello world test"""


# ---------- Handlers ----------


def show_status(settings: ClusterSettings, argument: str | None = None) -> None:
    status("MPI Cluster Status:")
    compose_ps(settings)


def build(settings: ClusterSettings, argument: str | None) -> None:
    status("Building MPI container image...")
    build_image(settings)
    success("Build complete!")


def start_cluster(settings: ClusterSettings, argument: str | None) -> None:
    workers = parse_worker_count(argument, settings.default_workers)
    status(f"Starting MPI cluster with {workers} workers...")
    compose_up(settings, workers)
    success("Cluster started!")
    show_status(settings)


def stop_cluster(settings: ClusterSettings, argument: str | None) -> None:
    status("Stopping MPI cluster...")
    compose_down(settings)
    success("Cluster stopped!")


def scale_cluster(settings: ClusterSettings, argument: str | None) -> None:
    workers = parse_worker_count(argument, settings.default_workers)
    status(f"Scaling cluster to {workers} workers...")
    compose_up(settings, workers)
    success("Scaling complete!")
    show_status(settings)


def exec_container(settings: ClusterSettings, argument: str | None) -> None:
    node = resolve_node_reference(argument or "master", settings)
    status(f"Executing bash in {node}...")
    exec_shell(settings, node)


def show_logs(settings: ClusterSettings, argument: str | None) -> None:
    node = resolve_node_reference(argument or "master", settings)
    logger.info(f"Showing logs for {node}")
    node_logs(settings, node)


def clean_all(settings: ClusterSettings, argument: str | None) -> None:
    warning("Cleaning up all containers and images...")
    compose_down(settings, purge=True)
    success("Cleanup complete!")


def hostfile(settings: ClusterSettings, argument: str | None) -> None:
    publish_hostfile(settings)


def mpi_test(settings: ClusterSettings, argument: str | None) -> None:
    run_mpi_test(settings)


def ssh_test(settings: ClusterSettings, argument: str | None) -> None:
    report = run_ssh_test(settings)
    logger.info(f"SSH test: {len(report.passed)} passed, {len(report.failed)} failed")


def print_usage(settings: ClusterSettings, argument: str | None) -> None:
    print(usage_text())


Handler = Callable[[ClusterSettings, str | None], None]

COMMAND_HANDLERS: dict[Command, Handler] = {
    Command.BUILD: build,
    Command.UP: start_cluster,
    Command.DOWN: stop_cluster,
    Command.SCALE: scale_cluster,
    Command.EXEC: exec_container,
    Command.LOGS: show_logs,
    Command.PS: show_status,
    Command.CLEAN: clean_all,
    Command.HOSTFILE: hostfile,
    Command.TEST: mpi_test,
    Command.SSH_TEST: ssh_test,
    Command.HELP: print_usage,
}

_unhandled = set(Command) - set(COMMAND_HANDLERS)
if _unhandled:
    raise RuntimeError(f"Commands without a handler: {sorted(c.value for c in _unhandled)}")


def dispatch(
    command: Command, argument: str | None, settings: ClusterSettings
) -> int:
    """Run the handler for `command`. Raises ClusterError on failure."""
    if argument is not None and command not in ARGUMENT_COMMANDS:
        raise InvalidArgumentError(
            f"Command '{command.value}' does not take an argument (got '{argument}')"
        )

    logger.debug(f"Dispatching {command.value} with argument {argument!r}")
    COMMAND_HANDLERS[command](settings, argument)
    return 0
