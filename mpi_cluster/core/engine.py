"""
Delegation to the container engine and the orchestration tool.

Every cluster lifecycle action is a single invocation of an external
command. Output streams straight to the terminal unless it is captured for
parsing.
"""

import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass

from ..utils.config import ClusterSettings
from ..utils.exceptions import DelegateFailureError
from ..utils.logging import get_logger, log_function_call

logger = get_logger(__name__)

NameLister = Callable[[ClusterSettings], list[str]]


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int


def run_command(
    args: list[str],
    capture: bool = False,
    check: bool = True,
    timeout: float | None = None,
) -> CommandResult:
    """Run an external command, raising DelegateFailureError on failure if check is set."""
    logger.info(f"Executing command: {' '.join(args)}")
    if not capture:
        # the child writes to the same stdout
        sys.stdout.flush()
    try:
        result = subprocess.run(
            args,
            capture_output=capture,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise DelegateFailureError(args, 127, f"{args[0]}: command not found")

    stdout = result.stdout or ""
    stderr = result.stderr or ""
    if result.returncode != 0:
        logger.info(f"Command failed with exit code {result.returncode}")
        if check:
            raise DelegateFailureError(args, result.returncode, stderr)

    return CommandResult(
        success=result.returncode == 0,
        stdout=stdout,
        stderr=stderr,
        exit_code=result.returncode,
    )


# ---------- Container engine ----------


@log_function_call
def build_image(settings: ClusterSettings) -> CommandResult:
    """Build the node image from the fixed build definition."""
    return run_command(
        [
            settings.docker_command,
            "build",
            "-f",
            settings.dockerfile,
            "-t",
            settings.image_tag,
            settings.build_context,
        ]
    )


@log_function_call
def exec_shell(settings: ClusterSettings, node: str) -> CommandResult:
    """Open an interactive shell inside a running node."""
    return run_command([settings.docker_command, "exec", "-it", node, "/bin/bash"])


@log_function_call
def exec_in_node(
    settings: ClusterSettings,
    node: str,
    script: str,
    capture: bool = False,
    check: bool = True,
    timeout: float | None = None,
) -> CommandResult:
    """Run a bash script non-interactively inside a running node."""
    return run_command(
        [settings.docker_command, "exec", node, "bash", "-c", script],
        capture=capture,
        check=check,
        timeout=timeout,
    )


@log_function_call
def node_logs(settings: ClusterSettings, node: str) -> CommandResult:
    return run_command([settings.docker_command, "logs", node])


@log_function_call
def list_running_names(settings: ClusterSettings) -> list[str]:
    """Names of all running containers, in the order the engine reports them."""
    result = run_command(
        [settings.docker_command, "ps", "--format", "{{.Names}}"], capture=True
    )
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


# ---------- Orchestration tool ----------


def _compose(settings: ClusterSettings, *args: str) -> list[str]:
    return [*settings.compose_command, "-f", settings.compose_file, *args]


@log_function_call
def compose_up(settings: ClusterSettings, workers: int) -> CommandResult:
    """Ensure one master and exactly `workers` worker nodes are running."""
    return run_command(
        _compose(
            settings, "up", "-d", "--scale", f"{settings.worker_service}={workers}"
        )
    )


@log_function_call
def compose_down(settings: ClusterSettings, purge: bool = False) -> CommandResult:
    """Stop and remove all nodes; with purge also remove images and volumes."""
    args = ["down"]
    if purge:
        args += ["--rmi", "all", "--volumes"]
    return run_command(_compose(settings, *args))


@log_function_call
def compose_ps(settings: ClusterSettings) -> CommandResult:
    return run_command(_compose(settings, "ps"))
