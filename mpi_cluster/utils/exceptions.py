"""
Custom exceptions for the MPI cluster controller.
"""


class ClusterError(Exception):
    """Base exception for all cluster controller errors."""

    exit_code = 1


class InvalidArgumentError(ClusterError):
    """Exception raised for a malformed command or argument."""

    pass


class NodeNotFoundError(ClusterError):
    """Exception raised when a node reference matches no running node."""

    def __init__(self, reference: str, detail: str | None = None) -> None:
        self.reference = reference
        message = f"No running node matches '{reference}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DelegateFailureError(ClusterError):
    """Exception raised when an external tool exits non-zero."""

    def __init__(self, command: list[str], exit_code: int, stderr: str = "") -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"'{' '.join(command)}' failed with exit code {exit_code}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class SharedStorageError(ClusterError):
    """Exception raised when the shared storage directory is not writable."""

    pass


class SSHConnectionError(ClusterError):
    """Exception raised when a node's SSH service never becomes ready."""

    pass


class ConfigurationError(ClusterError):
    """Exception raised for configuration errors."""

    pass
