"""
Unit tests for configuration loading
"""
import json
from pathlib import Path

import pytest

from mpi_cluster.utils.config import (
    ClusterSettings,
    load_config,
    validate_config,
)
from mpi_cluster.utils.exceptions import ConfigurationError


class TestLoadConfig:
    """Tests for load_config"""

    def test_defaults(self):
        config = load_config()
        assert config["MASTER_NAME"] == "mpi-master"
        assert config["DEFAULT_WORKERS"] == 3
        assert validate_config(config) == []

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MPI_CLUSTER_MASTER_NAME", "head")
        assert load_config()["MASTER_NAME"] == "head"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("MPI_CLUSTER_IMAGE_TAG=custom-mpi\n")
        assert load_config()["IMAGE_TAG"] == "custom-mpi"

    def test_json_file(self, tmp_path):
        config_file = tmp_path / "cluster.json"
        config_file.write_text(json.dumps({"TEST_PROCESSES": 8}))
        assert load_config(config_file)["TEST_PROCESSES"] == 8

    def test_environment_beats_json_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cluster.json"
        config_file.write_text(json.dumps({"TEST_PROCESSES": 8}))
        monkeypatch.setenv("MPI_CLUSTER_TEST_PROCESSES", "2")
        assert load_config(config_file)["TEST_PROCESSES"] == "2"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.json")

    def test_malformed_file(self, tmp_path):
        config_file = tmp_path / "cluster.json"
        config_file.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_config(config_file)


class TestValidateConfig:
    """Tests for validate_config"""

    def test_invalid_numbers(self):
        config = load_config()
        config["SSH_PORT"] = "abc"
        config["DEFAULT_WORKERS"] = -1
        config["SSH_READY_INTERVAL"] = "soon"
        assert len(validate_config(config)) == 3

    def test_empty_name(self):
        config = load_config()
        config["MASTER_NAME"] = ""
        assert validate_config(config) == ["Missing required configuration: MASTER_NAME"]

    def test_log_level(self):
        config = load_config()
        config["LOG_LEVEL"] = "LOUD"
        assert validate_config(config) == ["Invalid LOG_LEVEL: LOUD"]


class TestClusterSettings:
    """Tests for ClusterSettings.from_config"""

    def test_typed_values(self, monkeypatch):
        monkeypatch.setenv("MPI_CLUSTER_SSH_READY_RETRIES", "4")
        monkeypatch.setenv("MPI_CLUSTER_COMPOSE_COMMAND", "docker compose")
        settings = ClusterSettings.from_config(load_config())
        assert settings.ssh_ready_retries == 4
        assert settings.compose_command == ("docker", "compose")
        assert settings.hostfile_path == Path("shared") / "hostfile"

    def test_invalid(self):
        config = load_config()
        config["SSH_PORT"] = "abc"
        with pytest.raises(ConfigurationError):
            ClusterSettings.from_config(config)
