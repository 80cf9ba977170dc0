"""
Resolution of human-friendly node references to running container names.

"master" maps to the fixed master name. "worker" and "worker-<N>" address
running workers by 1-based ordinal in natural sort order, so "worker-10"
comes after "worker-9". Anything else is taken as a container name, with
the node prefix added when missing.
"""

import re

from ..types import worker_names
from ..utils.config import ClusterSettings
from ..utils.exceptions import NodeNotFoundError
from ..utils.logging import get_logger, log_function_call
from .engine import NameLister, list_running_names

logger = get_logger(__name__)

WORKER_REFERENCE = re.compile(r"^worker(?:-([0-9]+))?$")


def list_workers(
    settings: ClusterSettings, lister: NameLister | None = None
) -> list[str]:
    """Running worker names in natural sort order."""
    return worker_names((lister or list_running_names)(settings), settings)


@log_function_call
def resolve_node_reference(
    reference: str,
    settings: ClusterSettings,
    lister: NameLister | None = None,
) -> str:
    """Resolve a node reference to a concrete container name."""
    if reference == "master":
        return settings.master_name

    match = WORKER_REFERENCE.match(reference)
    if match:
        ordinal = int(match.group(1)) if match.group(1) else 1
        workers = list_workers(settings, lister)
        logger.debug(f"Running workers: {workers}")
        if not workers:
            raise NodeNotFoundError(reference, "no worker nodes are running")
        if ordinal < 1 or ordinal > len(workers):
            raise NodeNotFoundError(
                reference, f"only {len(workers)} worker node(s) are running"
            )
        return workers[ordinal - 1]

    if not reference.startswith(settings.node_prefix):
        return settings.node_prefix + reference
    return reference
