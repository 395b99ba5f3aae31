"""
Container Runner
================
Start/stop pairing for the fixed-name test containers.

LIFECYCLE:
    1. remove_if_exists(name)   — stop + rm, absence is fine (`|| true`)
    2. start(variant)           — docker run -d --name ... -p host:container
    3. is_running(name)         — docker ps | grep name

Because every start is preceded by a removal of the same name, re-running a
cycle never leaves two containers for one role.
"""
import os
import logging
from typing import Optional

import docker
from docker.errors import APIError, ImageNotFound, NotFound

from shipyard.core.errors import ContainerStartError
from shipyard.models.variant import BuildVariant

logger = logging.getLogger(__name__)


class ContainerRunner:

    def __init__(self, client: docker.DockerClient) -> None:
        self.client = client

    def remove_if_exists(self, name: str) -> bool:
        """
        Stop and remove a container by name. Never raises.

        Returns True if a container was found.
        """
        try:
            container = self.client.containers.get(name)
        except NotFound:
            logger.debug("No container named %s", name)
            return False
        except APIError as e:
            logger.warning("Could not look up container %s: %s", name, e)
            return False

        try:
            container.stop()
        except APIError as e:
            logger.debug("Stop %s: %s", name, e)
        try:
            container.remove()
        except APIError as e:
            logger.debug("Remove %s: %s", name, e)
        logger.debug("Removed container %s", name)
        return True

    def start(
        self,
        variant: BuildVariant,
        context_path: Optional[str] = None,
        name: Optional[str] = None,
        ports: Optional[dict] = None,
        restart_policy: Optional[dict] = None,
    ):
        """Run ``variant.image_ref`` detached with its port mapping."""
        container_name = name or variant.container_name
        run_kwargs = {
            "detach": True,
            "name": container_name,
            "ports": ports or variant.port_bindings,
        }
        if variant.mount_target and context_path:
            run_kwargs["volumes"] = {
                os.path.abspath(context_path): {"bind": variant.mount_target, "mode": "rw"},
            }
        if restart_policy:
            run_kwargs["restart_policy"] = restart_policy

        try:
            container = self.client.containers.run(variant.image_ref, **run_kwargs)
        except ImageNotFound as e:
            raise ContainerStartError(
                f"Image {variant.image_ref} not found. Build it first."
            ) from e
        except APIError as e:
            raise ContainerStartError(f"Failed to start {container_name}: {e}") from e

        logger.info("Started container %s (%s)", container_name, container.short_id)
        return container

    def is_running(self, name: str) -> bool:
        # The name filter is a substring match; compare exactly.
        try:
            containers = self.client.containers.list(filters={"name": name})
        except APIError as e:
            logger.warning("Could not list containers: %s", e)
            return False
        return any(c.name == name for c in containers)

    def describe(self, name: str) -> str:
        """One-line `docker ps` style summary, or empty string if not running."""
        try:
            container = self.client.containers.get(name)
        except (NotFound, APIError):
            return ""
        if container.status != "running":
            return ""
        ports = []
        for container_port, bindings in (container.ports or {}).items():
            for binding in bindings or []:
                ports.append(f"{binding.get('HostIp', '')}:{binding.get('HostPort')}->{container_port}")
        image = container.image.tags[0] if container.image.tags else container.image.short_id
        return f"{container.short_id}   {image}   {container.status}   {', '.join(ports)}   {name}"
