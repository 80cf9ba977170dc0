"""
Connectivity and message-passing smoke tests for a running cluster.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from ..core.engine import NameLister, exec_in_node, list_running_names
from ..core.hostfile import generate_hostfile, parse_hostfile
from ..core.ssh import ProbeResult, probe_node, wait_for_node, wait_for_nodes
from ..types import HostfileEntry, sort_node_names
from ..utils.config import ClusterSettings
from ..utils.exceptions import ClusterError, SharedStorageError
from ..utils.logging import (
    failure,
    get_logger,
    log_execution_time,
    status,
    success,
    warning,
)

logger = get_logger(__name__)

MPI_SOURCE_NAME = "test_mpi.c"
MPI_BINARY_NAME = "test_mpi"

MPI_HELLO_SOURCE = r"""#include <mpi.h>
#include <stdio.h>
#include <unistd.h>

int main(int argc, char** argv) {
    MPI_Init(&argc, &argv);
    int rank, size;
    char hostname[256];
    MPI_Comm_rank(MPI_COMM_WORLD, &rank);
    MPI_Comm_size(MPI_COMM_WORLD, &size);
    gethostname(hostname, sizeof(hostname));
    printf("Hello from rank %d of %d on %s\n", rank, size, hostname);
    MPI_Finalize();
    return 0;
}
"""

RANK_LINE = re.compile(r"Hello from rank (\d+) of (\d+) on (\S+)")


@dataclass
class SSHTestReport:
    """Per-node results of the SSH connectivity test."""

    results: list[ProbeResult] = field(default_factory=list)

    @property
    def passed(self) -> list[ProbeResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[ProbeResult]:
        return [r for r in self.results if not r.success]


def parse_rank_lines(output: str) -> list[tuple[int, int, str]]:
    """(rank, size, host) for every hello-world line in `output`."""
    return [
        (int(m.group(1)), int(m.group(2)), m.group(3))
        for m in RANK_LINE.finditer(output)
    ]


def publish_hostfile(
    settings: ClusterSettings,
    lister: NameLister | None = None,
) -> list[HostfileEntry]:
    """Generate the hostfile and echo its contents."""
    status("Generating MPI hostfile...")
    path, entries, content = generate_hostfile(settings, lister or list_running_names)
    success(f"Hostfile created at {path}")
    print("Contents:")
    print(content, end="")
    return entries


def write_test_program(shared_dir: Path) -> Path:
    path = shared_dir / MPI_SOURCE_NAME
    try:
        shared_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(MPI_HELLO_SOURCE)
    except OSError as e:
        raise SharedStorageError(f"Failed to write {path}: {e}")
    return path


def read_hostfile(path: Path) -> list[HostfileEntry]:
    """Entries of the hostfile mpirun will be given."""
    try:
        return parse_hostfile(path.read_text())
    except OSError as e:
        raise SharedStorageError(f"Failed to read {path}: {e}")


@log_execution_time
def run_mpi_test(settings: ClusterSettings) -> None:
    """Compile and run the hello-world program locally, then across all nodes."""
    status("Running MPI test...")
    write_test_program(settings.shared_dir)
    entries = publish_hostfile(settings)

    print("Waiting for SSH to be ready...")
    wait_for_nodes(settings, [entry.name for entry in entries])

    remote = settings.remote_shared_dir
    print("Compiling MPI test program...")
    exec_in_node(
        settings,
        settings.master_name,
        f"cd {remote} && mpicc {MPI_SOURCE_NAME} -o {MPI_BINARY_NAME}",
    )

    processes = settings.test_processes
    warning(f"Running single-container MPI test ({processes} processes):")
    exec_in_node(
        settings,
        settings.master_name,
        f"cd {remote} && mpirun --allow-run-as-root -np {processes} ./{MPI_BINARY_NAME}",
    )

    total_slots = sum(entry.slots for entry in read_hostfile(settings.hostfile_path))
    if total_slots > 1:
        warning(
            f"Running multi-container MPI test ({total_slots} processes, 1 per container):"
        )
        exec_in_node(
            settings,
            settings.master_name,
            f"cd {remote} && mpirun --allow-run-as-root --hostfile {settings.hostfile_name} "
            f"--map-by ppr:1:node -np {total_slots} ./{MPI_BINARY_NAME}",
        )
    else:
        warning("Only one container available for testing")


def run_ssh_test(
    settings: ClusterSettings,
    lister: NameLister | None = None,
) -> SSHTestReport:
    """Probe SSH from the master to every other node, collecting failures."""
    status("Testing SSH connectivity between containers...")
    nodes = sort_node_names(
        [
            name
            for name in (lister or list_running_names)(settings)
            if settings.node_prefix in name
        ]
    )
    print("Available containers:")
    for node in nodes:
        print(node)
    print("")

    warning(f"Testing SSH from {settings.master_name} to workers:")
    report = SSHTestReport()
    for node in nodes:
        if node == settings.master_name:
            continue
        try:
            # a single attempt, bounded by SSH_CONNECT_TIMEOUT
            wait_for_node(settings, node, retries=1)
            result = probe_node(settings, node)
        except ClusterError as e:
            logger.info(f"Readiness check for {node} failed: {e}")
            result = ProbeResult(node, False, str(e))

        report.results.append(result)
        if result.success:
            success(f"  {node}: ✅ Connected ({result.detail})")
        else:
            failure(f"  {node}: ❌ Failed")

    success("SSH connectivity test complete!")
    return report
