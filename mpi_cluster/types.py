"""
Type definitions for the MPI cluster controller.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .utils.config import ClusterSettings

_DIGIT_RUN = re.compile(r"(\d+)")
_TRAILING_DIGITS = re.compile(r"(\d+)$")


class NodeRole(Enum):
    """Node roles."""

    MASTER = "master"
    WORKER = "worker"


@dataclass(frozen=True)
class Node:
    """A running container acting as one cluster member."""

    name: str
    role: NodeRole
    ordinal: int | None = None


@dataclass(frozen=True)
class HostfileEntry:
    """One line of the MPI hostfile."""

    name: str
    slots: int = 1

    def to_line(self) -> str:
        return f"{self.name} slots={self.slots}"


def natural_sort_key(name: str) -> tuple:
    """Sort key that compares digit runs numerically ("worker-2" < "worker-10")."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGIT_RUN.split(name)
        if part
    )


def sort_node_names(names: list[str]) -> list[str]:
    return sorted(names, key=natural_sort_key)


def classify_node(name: str, settings: "ClusterSettings") -> Node | None:
    """Build a Node from a container name, or None if it is not a cluster member."""
    if name == settings.master_name:
        return Node(name=name, role=NodeRole.MASTER)
    if settings.worker_marker in name:
        match = _TRAILING_DIGITS.search(name)
        ordinal = int(match.group(1)) if match else None
        return Node(name=name, role=NodeRole.WORKER, ordinal=ordinal)
    return None


def worker_names(names: list[str], settings: "ClusterSettings") -> list[str]:
    """Distinct worker names among `names`, in natural sort order."""
    workers = set()
    for name in names:
        node = classify_node(name, settings)
        if node is not None and node.role == NodeRole.WORKER:
            workers.add(node.name)
    return sort_node_names(list(workers))
