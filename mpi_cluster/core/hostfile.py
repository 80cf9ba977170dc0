"""
MPI hostfile generation.

The hostfile lists the master first and then every running worker in
natural sort order, one slot per node. It is always rewritten in full via a
temp file and an atomic rename, so readers never see a partial listing.
"""

import os
import tempfile
from datetime import datetime
from pathlib import Path

from ..types import HostfileEntry, worker_names
from ..utils.config import ClusterSettings
from ..utils.exceptions import SharedStorageError
from ..utils.logging import get_logger, log_function_call
from .engine import NameLister, list_running_names

logger = get_logger(__name__)


def build_membership(names: list[str], settings: ClusterSettings) -> list[HostfileEntry]:
    """Master entry followed by the running workers."""
    entries = [HostfileEntry(settings.master_name)]
    entries.extend(HostfileEntry(name) for name in worker_names(names, settings))
    return entries


def render_hostfile(entries: list[HostfileEntry], generated_at: datetime) -> str:
    lines = [
        f"# MPI Hostfile - Generated {generated_at.strftime('%a %b %d %H:%M:%S %Y')}",
        "# Format: hostname slots=N",
    ]
    lines.extend(entry.to_line() for entry in entries)
    return "\n".join(lines) + "\n"


def parse_hostfile(content: str) -> list[HostfileEntry]:
    """Entries of a rendered hostfile, ignoring comments and blank lines."""
    entries = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        name, _, slots = line.partition(" slots=")
        entries.append(HostfileEntry(name.strip(), int(slots) if slots else 1))
    return entries


@log_function_call
def write_hostfile(path: Path, content: str) -> None:
    """Atomically replace the hostfile at `path` with `content`."""
    temp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(temp_name, 0o644)
        os.replace(temp_name, path)
        logger.info(f"Wrote hostfile {path}")
    except OSError as e:
        if temp_name and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise SharedStorageError(f"Failed to write hostfile {path}: {e}")


@log_function_call
def generate_hostfile(
    settings: ClusterSettings,
    lister: NameLister | None = None,
    now: datetime | None = None,
) -> tuple[Path, list[HostfileEntry], str]:
    """List running nodes, then write and return the hostfile."""
    entries = build_membership((lister or list_running_names)(settings), settings)
    content = render_hostfile(entries, now or datetime.now())
    write_hostfile(settings.hostfile_path, content)
    return settings.hostfile_path, entries, content
