"""
Utility modules for the MPI cluster controller.
"""

from .config import ClusterSettings, load_config, validate_config
from .exceptions import (
    ClusterError,
    ConfigurationError,
    DelegateFailureError,
    SharedStorageError,
    InvalidArgumentError,
    NodeNotFoundError,
    SSHConnectionError,
)
from .logging import get_logger, log_execution_time, log_function_call, setup_logging

__all__ = [
    "ClusterError",
    "InvalidArgumentError",
    "NodeNotFoundError",
    "DelegateFailureError",
    "SharedStorageError",
    "SSHConnectionError",
    "ConfigurationError",
    "ClusterSettings",
    "setup_logging",
    "get_logger",
    "log_function_call",
    "log_execution_time",
    "load_config",
    "validate_config",
]
