"""
Local MPI cluster controller.

Scripts the lifecycle of a Docker Compose emulated MPI cluster (one master,
N workers) and provides hostfile generation and connectivity smoke tests.
"""

__version__ = "1.0.0"

from .controller.commands import Command, dispatch
from .core.hostfile import generate_hostfile
from .core.resolver import resolve_node_reference
from .utils.config import ClusterSettings, load_config
from .utils.logging import setup_logging

__all__ = [
    "Command",
    "dispatch",
    "generate_hostfile",
    "resolve_node_reference",
    "ClusterSettings",
    "load_config",
    "setup_logging",
]
