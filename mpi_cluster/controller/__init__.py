"""
Command dispatch and smoke tests for the MPI cluster controller.
"""

from .commands import COMMAND_HANDLERS, Command, dispatch, parse_worker_count, usage_text
from .smoke import (
    MPI_HELLO_SOURCE,
    SSHTestReport,
    parse_rank_lines,
    publish_hostfile,
    run_mpi_test,
    run_ssh_test,
)

__all__ = [
    "Command",
    "COMMAND_HANDLERS",
    "dispatch",
    "parse_worker_count",
    "usage_text",
    "MPI_HELLO_SOURCE",
    "SSHTestReport",
    "parse_rank_lines",
    "publish_hostfile",
    "run_mpi_test",
    "run_ssh_test",
]
