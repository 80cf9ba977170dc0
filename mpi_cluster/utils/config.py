"""
Configuration management for the MPI cluster controller.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigurationError

ENV_PREFIX = "MPI_CLUSTER_"

DEFAULTS: dict[str, Any] = {
    "COMPOSE_FILE": "docker-compose.yml",
    "COMPOSE_COMMAND": "docker-compose",
    "DOCKER_COMMAND": "docker",
    "DOCKERFILE": "base/amazon_linux.Dockerfile",
    "IMAGE_TAG": "mpi-amazonlinux",
    "BUILD_CONTEXT": ".",
    "NODE_PREFIX": "mpi-",
    "MASTER_NAME": "mpi-master",
    "WORKER_SERVICE": "mpi-worker",
    "SHARED_DIR": "./shared",
    "REMOTE_SHARED_DIR": "/shared",
    "HOSTFILE_NAME": "hostfile",
    "DEFAULT_WORKERS": 3,
    "TEST_PROCESSES": 4,
    "SSH_CONNECT_TIMEOUT": 5,
    "SSH_PORT": 22,
    "SSH_READY_RETRIES": 10,
    "SSH_READY_INTERVAL": 1.0,
    "LOG_LEVEL": "WARNING",
    "LOG_FILE": None,
}

INT_KEYS = [
    "DEFAULT_WORKERS",
    "TEST_PROCESSES",
    "SSH_CONNECT_TIMEOUT",
    "SSH_PORT",
    "SSH_READY_RETRIES",
]
FLOAT_KEYS = ["SSH_READY_INTERVAL"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
NAME_KEYS = [
    "COMPOSE_COMMAND",
    "DOCKER_COMMAND",
    "MASTER_NAME",
    "WORKER_SERVICE",
    "SHARED_DIR",
    "REMOTE_SHARED_DIR",
    "HOSTFILE_NAME",
]


def load_config(config_file: Path | None = None) -> dict[str, Any]:
    """Load configuration from defaults, a JSON file and environment variables."""
    config = dict(DEFAULTS)

    # Load .env file if it exists
    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file {config_file} does not exist")
        try:
            with open(config_file) as f:
                config.update(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config file {config_file}: {e}")

    for key in DEFAULTS:
        value = os.getenv(ENV_PREFIX + key)
        if value is not None:
            config[key] = value

    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    for key in NAME_KEYS:
        if not str(config.get(key) or "").strip():
            errors.append(f"Missing required configuration: {key}")

    for key in INT_KEYS:
        try:
            if int(config[key]) < 0:
                errors.append(f"Negative value for {key}: {config[key]}")
        except (KeyError, ValueError, TypeError):
            errors.append(f"Invalid numeric value for {key}: {config.get(key)}")

    for key in FLOAT_KEYS:
        try:
            float(config[key])
        except (KeyError, ValueError, TypeError):
            errors.append(f"Invalid numeric value for {key}: {config.get(key)}")

    if str(config.get("LOG_LEVEL", "")).upper() not in LOG_LEVELS:
        errors.append(f"Invalid LOG_LEVEL: {config.get('LOG_LEVEL')}")

    return errors


@dataclass(frozen=True)
class ClusterSettings:
    """Typed view of the controller configuration."""

    compose_file: str
    compose_command: tuple[str, ...]
    docker_command: str
    dockerfile: str
    image_tag: str
    build_context: str
    node_prefix: str
    master_name: str
    worker_service: str
    shared_dir: Path
    remote_shared_dir: str
    hostfile_name: str
    default_workers: int
    test_processes: int
    ssh_connect_timeout: int
    ssh_port: int
    ssh_ready_retries: int
    ssh_ready_interval: float

    @property
    def hostfile_path(self) -> Path:
        return self.shared_dir / self.hostfile_name

    @property
    def worker_marker(self) -> str:
        return self.worker_service

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "ClusterSettings":
        errors = validate_config(config)
        if errors:
            raise ConfigurationError("; ".join(errors))

        return cls(
            compose_file=str(config["COMPOSE_FILE"]),
            compose_command=tuple(str(config["COMPOSE_COMMAND"]).split()),
            docker_command=str(config["DOCKER_COMMAND"]),
            dockerfile=str(config["DOCKERFILE"]),
            image_tag=str(config["IMAGE_TAG"]),
            build_context=str(config["BUILD_CONTEXT"]),
            node_prefix=str(config["NODE_PREFIX"]),
            master_name=str(config["MASTER_NAME"]),
            worker_service=str(config["WORKER_SERVICE"]),
            shared_dir=Path(str(config["SHARED_DIR"])),
            remote_shared_dir=str(config["REMOTE_SHARED_DIR"]),
            hostfile_name=str(config["HOSTFILE_NAME"]),
            default_workers=int(config["DEFAULT_WORKERS"]),
            test_processes=int(config["TEST_PROCESSES"]),
            ssh_connect_timeout=int(config["SSH_CONNECT_TIMEOUT"]),
            ssh_port=int(config["SSH_PORT"]),
            ssh_ready_retries=int(config["SSH_READY_RETRIES"]),
            ssh_ready_interval=float(config["SSH_READY_INTERVAL"]),
        )
