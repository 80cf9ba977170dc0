"""
SSH readiness checks and connectivity probes between nodes.

Readiness is checked from inside the master: a paramiko handshake runs
through a byte tunnel that the master opens to the node's SSH port, so the
check uses the same cluster network as mpirun and ssh.
"""

import shlex
import subprocess
import time
from dataclasses import dataclass

import paramiko

from ..utils.config import ClusterSettings
from ..utils.exceptions import ClusterError, SSHConnectionError
from ..utils.logging import get_logger, log_function_call
from .engine import exec_in_node

logger = get_logger(__name__)

# docker exec startup on top of the ssh connect timeout
PROBE_GRACE_SECONDS = 1


@dataclass
class ProbeResult:
    """Outcome of one remote command from the master to a node."""

    node: str
    success: bool
    detail: str


def tunnel_command(settings: ClusterSettings, node: str) -> str:
    """Command whose stdin/stdout are connected to node:ssh_port, as seen from the master."""
    relay = (
        f"exec 3<>/dev/tcp/{node}/{settings.ssh_port} && "
        "{ cat <&3 & cat >&3; }"
    )
    return shlex.join(
        [settings.docker_command, "exec", "-i", settings.master_name, "bash", "-c", relay]
    )


def ssh_handshake(command: str, timeout: float) -> None:
    """Complete an SSH transport handshake through `command`, then disconnect."""
    sock = paramiko.ProxyCommand(command)
    try:
        transport = paramiko.Transport(sock)
        try:
            transport.banner_timeout = timeout
            transport.start_client(timeout=timeout)
        finally:
            transport.close()
    finally:
        sock.close()


@log_function_call
def wait_for_ssh(
    settings: ClusterSettings,
    node: str,
    retries: int = 10,
    interval: float = 1.0,
    timeout: float = 5.0,
) -> int:
    """Poll the node's SSH port until it serves SSH. Returns the number of attempts used."""
    command = tunnel_command(settings, node)
    last_error: Exception | None = None
    for attempt in range(1, retries + 1):
        try:
            ssh_handshake(command, timeout)
            logger.info(f"SSH ready on {node} after {attempt} attempt(s)")
            return attempt
        except (OSError, EOFError, paramiko.SSHException) as e:
            last_error = e
            logger.debug(f"SSH not ready on {node} (attempt {attempt}): {e}")
            if attempt < retries:
                time.sleep(interval)

    raise SSHConnectionError(
        f"SSH on {node} not ready after {retries} attempts: {last_error}"
    )


def wait_for_node(
    settings: ClusterSettings, node: str, retries: int | None = None
) -> None:
    """Wait until a node's SSH service accepts connections.

    `retries` defaults to SSH_READY_RETRIES; SSH_READY_RETRIES=0 disables the check.
    """
    if settings.ssh_ready_retries == 0:
        return

    wait_for_ssh(
        settings,
        node,
        retries=settings.ssh_ready_retries if retries is None else retries,
        interval=settings.ssh_ready_interval,
        timeout=settings.ssh_connect_timeout,
    )


def wait_for_nodes(settings: ClusterSettings, nodes: list[str]) -> None:
    for node in nodes:
        wait_for_node(settings, node)


@log_function_call
def probe_node(settings: ClusterSettings, target: str) -> ProbeResult:
    """Run `hostname` on `target` over SSH from the master."""
    timeout = settings.ssh_connect_timeout
    script = (
        f"ssh -o ConnectTimeout={timeout} -o BatchMode=yes {target} hostname"
    )
    try:
        result = exec_in_node(
            settings,
            settings.master_name,
            script,
            capture=True,
            check=False,
            timeout=timeout + PROBE_GRACE_SECONDS,
        )
    except subprocess.TimeoutExpired:
        return ProbeResult(target, False, f"timed out after {timeout}s")
    except ClusterError as e:
        return ProbeResult(target, False, str(e))

    if result.success:
        return ProbeResult(target, True, result.stdout.strip())
    return ProbeResult(target, False, result.stderr.strip() or f"exit code {result.exit_code}")
