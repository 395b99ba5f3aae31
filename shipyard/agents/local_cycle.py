"""
Local Cycle
===========
Build, run, smoke-test and tear down the two image variants on the local
Docker engine.

COMMAND SEQUENCES:
    prod     build production  → test production  → sizes
    dev      build development → test development → sizes
    both     build production  → build development → test production
             → test development → sizes
    sizes    sizes
    cleanup  stop + rm both test containers

FAILURE POLICY:
    - Build failures and container start failures raise (the `set -e` steps).
    - Missing containers during stop/rm are ignored (the `|| true` steps).
    - A missed HTTP probe is a warning; the app may still be starting.

No locking: two concurrent invocations share the engine's container
namespace and will race on the fixed container names.
"""
import time
import logging
from typing import Callable, Optional

import docker

from shipyard.core import config
from shipyard.core.constants import TEST_CONTAINERS
from shipyard.executor.container_runner import ContainerRunner
from shipyard.executor.docker_client import get_docker_client
from shipyard.executor.image_builder import build_image
from shipyard.models.build_result import BuildResult
from shipyard.models.smoke_result import SmokeResult
from shipyard.models.variant import BuildVariant, production_variant, development_variant
from shipyard.services.image_report import show_image_sizes
from shipyard.services.smoke_test import SmokeTester
from shipyard.utils.logging_config import log_success

logger = logging.getLogger(__name__)


class LocalCycle:
    """
    Runs the local build/test/cleanup sequences.

    Usage:
        cycle = LocalCycle()
        cycle.run_production()
        ...
        cycle.cleanup()
    """

    def __init__(
        self,
        client: Optional[docker.DockerClient] = None,
        production: Optional[BuildVariant] = None,
        development: Optional[BuildVariant] = None,
        build_context: Optional[str] = None,
        build_number: Optional[str] = None,
        image_prefix: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self.production = production or production_variant()
        self.development = development or development_variant()
        self.build_context = build_context or config.BUILD_CONTEXT
        self.build_number = build_number if build_number is not None else config.BUILD_NUMBER
        self.image_prefix = image_prefix or config.IMAGE_PREFIX
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Engine access (lazy: `help` must work without a daemon)
    # ------------------------------------------------------------------
    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            self._client = get_docker_client()
        return self._client

    def connect(self) -> docker.DockerClient:
        return self.client

    @property
    def runner(self) -> ContainerRunner:
        return ContainerRunner(self.client)

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    def build(self, variant: BuildVariant) -> BuildResult:
        result = build_image(self.client, variant, self.build_context, self.build_number)
        log_success(logger, "%s image built successfully!", variant.name.capitalize())
        return result

    def test(self, variant: BuildVariant) -> SmokeResult:
        logger.info("Testing %s image...", variant.name)
        runner = self.runner

        # Stop any existing container
        runner.remove_if_exists(variant.container_name)
        runner.start(variant, context_path=self.build_context)

        # Wait for startup
        self._sleep(variant.startup_wait_seconds)

        result = SmokeTester(runner).check(variant)

        if variant.probe_http:
            if result.passed:
                log_success(logger, "%s app is running! Visit: %s",
                            variant.name.capitalize(), variant.url)
            else:
                logger.warning("%s app may still be starting up. Check: %s",
                               variant.name.capitalize(), variant.url)
        else:
            logger.info("Development server starting... This may take a moment.")
            logger.info("Visit: %s", variant.url)

        # Show container info
        summary = runner.describe(variant.container_name)
        if summary:
            print(summary)
        else:
            logger.warning("Container %s is not running", variant.container_name)
        return result

    def show_sizes(self) -> None:
        show_image_sizes(self.client, self.image_prefix)

    def cleanup(self) -> list[str]:
        """Stop and remove both test containers. Returns the names that existed."""
        logger.info("Cleaning up test containers...")
        runner = self.runner
        removed = [name for name in TEST_CONTAINERS if runner.remove_if_exists(name)]
        log_success(logger, "Cleanup completed!")
        return removed

    # ------------------------------------------------------------------
    # Command sequences
    # ------------------------------------------------------------------
    def run_production(self) -> SmokeResult:
        self.build(self.production)
        result = self.test(self.production)
        self.show_sizes()
        return result

    def run_development(self) -> SmokeResult:
        self.build(self.development)
        result = self.test(self.development)
        self.show_sizes()
        return result

    def run_both(self) -> list[SmokeResult]:
        self.build(self.production)
        self.build(self.development)
        results = [self.test(self.production), self.test(self.development)]
        self.show_sizes()
        return results
