"""
Docker Client
=============
Single entry point for obtaining a docker SDK client.

The SDK connects lazily, so a ping is issued up front: a missing daemon
must surface as one clear error before any build starts, not as an
APIError halfway through a command.
"""
import logging

import docker
from docker.errors import DockerException

from shipyard.core.errors import EngineUnavailableError

logger = logging.getLogger(__name__)


def get_docker_client() -> docker.DockerClient:
    try:
        client = docker.from_env()
        client.ping()
    except DockerException as e:
        raise EngineUnavailableError(
            f"Cannot connect to the Docker daemon. Is Docker running? ({e})"
        ) from e
    logger.debug("Connected to Docker daemon")
    return client
