"""
Build Variant Model
===================
Pydantic model describing one build target of the multi-stage Dockerfile
together with the container that smoke-tests it.

Fields:
    name                  — "production" or "development"
    target                — Dockerfile stage selected with --target
    image                 — image repository (e.g. react-app-prod)
    tag                   — moving tag, normally "latest"
    container_name        — fixed smoke-test container name
    host_port             — port published on the host
    container_port        — port the runtime listens on inside the container
    startup_wait_seconds  — fixed sleep between start and smoke test
    mount_target          — bind-mount point for the build context (dev only)
    probe_http            — whether the smoke test issues an HTTP probe
"""
from typing import Optional

from pydantic import BaseModel

from shipyard.core import config
from shipyard.core.constants import (
    PRODUCTION,
    DEVELOPMENT,
    PROD_TEST_CONTAINER,
    DEV_TEST_CONTAINER,
    PROD_CONTAINER_PORT,
    DEV_CONTAINER_PORT,
    DEV_MOUNT_TARGET,
)


class BuildVariant(BaseModel):
    name: str
    target: str
    image: str
    tag: str = "latest"
    container_name: str
    host_port: int
    container_port: int
    startup_wait_seconds: float = 5.0
    mount_target: Optional[str] = None
    probe_http: bool = False

    @property
    def image_ref(self) -> str:
        return f"{self.image}:{self.tag}"

    @property
    def url(self) -> str:
        return f"http://localhost:{self.host_port}"

    @property
    def port_bindings(self) -> dict[str, int]:
        return {f"{self.container_port}/tcp": self.host_port}


def production_variant() -> BuildVariant:
    """nginx runtime serving the static build on port 80."""
    return BuildVariant(
        name=PRODUCTION,
        target=PRODUCTION,
        image=config.PROD_IMAGE,
        tag=config.IMAGE_TAG,
        container_name=PROD_TEST_CONTAINER,
        host_port=config.PROD_HOST_PORT,
        container_port=PROD_CONTAINER_PORT,
        startup_wait_seconds=config.PROD_STARTUP_WAIT,
        probe_http=True,
    )


def development_variant() -> BuildVariant:
    """Dev server with the source tree mounted for live reload."""
    return BuildVariant(
        name=DEVELOPMENT,
        target=DEVELOPMENT,
        image=config.DEV_IMAGE,
        tag=config.IMAGE_TAG,
        container_name=DEV_TEST_CONTAINER,
        host_port=config.DEV_HOST_PORT,
        container_port=DEV_CONTAINER_PORT,
        startup_wait_seconds=config.DEV_STARTUP_WAIT,
        mount_target=DEV_MOUNT_TARGET,
        probe_http=False,
    )
