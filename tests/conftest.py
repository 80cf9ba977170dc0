"""
Pytest configuration and fixtures
"""

import os

import pytest

from mpi_cluster.utils.config import DEFAULTS, ClusterSettings


# ============================================
# Settings Fixtures
# ============================================

@pytest.fixture
def config(tmp_path):
    """Default configuration with the shared dir under tmp_path"""
    values = dict(DEFAULTS)
    values["SHARED_DIR"] = str(tmp_path / "shared")
    values["SSH_READY_INTERVAL"] = 0
    return values


@pytest.fixture
def settings(config) -> ClusterSettings:
    return ClusterSettings.from_config(config)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep .env files and MPI_CLUSTER_* variables of the host out of tests"""
    monkeypatch.chdir(tmp_path)
    for key in DEFAULTS:
        monkeypatch.delenv(f"MPI_CLUSTER_{key}", raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for key in DEFAULTS:
        os.environ.pop(f"MPI_CLUSTER_{key}", None)


# ============================================
# Running Node Fixtures
# ============================================

@pytest.fixture
def running_names():
    """Container names as `docker ps` reports them (unordered)"""
    return [
        "mpi_cluster-mpi-worker-3",
        "mpi-master",
        "mpi_cluster-mpi-worker-1",
        "unrelated-redis",
        "mpi_cluster-mpi-worker-2",
    ]


@pytest.fixture
def lister(running_names):
    return lambda settings: list(running_names)
