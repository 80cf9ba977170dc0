"""
Core modules for the MPI cluster controller.
"""

from .engine import (
    CommandResult,
    build_image,
    compose_down,
    compose_ps,
    compose_up,
    exec_in_node,
    exec_shell,
    list_running_names,
    node_logs,
    run_command,
)
from .hostfile import (
    build_membership,
    generate_hostfile,
    parse_hostfile,
    render_hostfile,
    write_hostfile,
)
from .resolver import list_workers, resolve_node_reference
from .ssh import ProbeResult, probe_node, wait_for_node, wait_for_nodes, wait_for_ssh

__all__ = [
    "CommandResult",
    "run_command",
    "build_image",
    "exec_shell",
    "exec_in_node",
    "node_logs",
    "list_running_names",
    "compose_up",
    "compose_down",
    "compose_ps",
    "build_membership",
    "render_hostfile",
    "parse_hostfile",
    "write_hostfile",
    "generate_hostfile",
    "list_workers",
    "resolve_node_reference",
    "ProbeResult",
    "probe_node",
    "wait_for_ssh",
    "wait_for_node",
    "wait_for_nodes",
]
