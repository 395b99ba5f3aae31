"""
Pipeline Runner
===============
Executes the CI pipeline's fixed stage list for the React app.

Stage order:
    checkout → install → build → docker-build → smoke-test → push → deploy
    post (always): cleanup

STAGE RULES:
    - Stages run strictly in order. Disabled stages are recorded as skipped.
    - The first failing stage stops the run; every later stage is skipped.
    - cleanup runs after every run, successful or not.

PARALLEL BLOCK:
    docker-build may build the production and development images in two
    branches. Branches share nothing; the stage joins both before
    smoke-test starts. Either branch failing fails the stage.
"""
import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Optional

from docker.errors import APIError

from shipyard.agents.local_cycle import LocalCycle
from shipyard.core.constants import (
    BUILD_OUTPUT_DIRS,
    DEPLOY_CONTAINER,
    PIPELINE_STAGES,
    STAGE_BUILD,
    STAGE_CHECKOUT,
    STAGE_CLEANUP,
    STAGE_DEPLOY,
    STAGE_DOCKER_BUILD,
    STAGE_INSTALL,
    STAGE_PUSH,
    STAGE_SMOKE_TEST,
)
from shipyard.core.errors import ContainerStartError, ShipyardError
from shipyard.executor.command_runner import run_command, run_with_fallback
from shipyard.models.build_result import BuildResult
from shipyard.models.pipeline_report import (
    PipelineReport,
    StageResult,
    STATUS_FAILED,
    STATUS_SKIPPED,
    STATUS_SUCCESS,
)
from shipyard.parser.pipeline_config import PipelineConfig
from shipyard.utils.logging_config import log_success

logger = logging.getLogger(__name__)


class StageSkipped(Exception):
    """Raised by a stage handler that has nothing to do."""


class PipelineRunner:

    def __init__(self, pipeline_config: PipelineConfig, cycle: Optional[LocalCycle] = None) -> None:
        self.config = pipeline_config
        self.workspace = os.path.abspath(pipeline_config.workspace)
        self.cycle = cycle or LocalCycle(
            build_context=self.workspace,
            build_number=pipeline_config.build_number,
        )
        self.builds: list[BuildResult] = []

        self._handlers: dict[str, Callable[[], dict]] = {
            STAGE_CHECKOUT: self._stage_checkout,
            STAGE_INSTALL: self._stage_install,
            STAGE_BUILD: self._stage_build,
            STAGE_DOCKER_BUILD: self._stage_docker_build,
            STAGE_SMOKE_TEST: self._stage_smoke_test,
            STAGE_PUSH: self._stage_push,
            STAGE_DEPLOY: self._stage_deploy,
        }

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------
    def run(self) -> PipelineReport:
        report = PipelineReport(
            build_number=self.config.build_number,
            started_at=datetime.now(timezone.utc),
        )
        failed = False

        for stage in PIPELINE_STAGES:
            if failed:
                report.stages.append(StageResult(name=stage, status=STATUS_SKIPPED,
                                                 details={"reason": "previous stage failed"}))
                continue
            if not self.config.is_enabled(stage):
                report.stages.append(StageResult(name=stage, status=STATUS_SKIPPED,
                                                 details={"reason": "disabled"}))
                continue

            result = self._run_stage(stage, self._handlers[stage])
            report.stages.append(result)
            failed = result.status == STATUS_FAILED

        # post { always { cleanup } }
        report.post.append(self._run_stage(STAGE_CLEANUP, self._stage_cleanup))

        report.finished_at = datetime.now(timezone.utc)
        if report.status == STATUS_SUCCESS:
            log_success(logger, "Pipeline completed successfully!")
        else:
            logger.error("Pipeline failed")
        return report

    def _run_stage(self, name: str, handler: Callable[[], dict]) -> StageResult:
        logger.info("[STAGE] %s", name)
        start = time.monotonic()
        try:
            details = handler() or {}
            status = STATUS_SUCCESS
            error = ""
        except StageSkipped as e:
            details = {"reason": str(e)}
            status = STATUS_SKIPPED
            error = ""
            logger.info("[STAGE] %s skipped: %s", name, e)
        except (ShipyardError, APIError) as e:
            details = {}
            status = STATUS_FAILED
            error = str(e)
            logger.error("[STAGE] %s failed: %s", name, e)

        return StageResult(
            name=name,
            status=status,
            duration_seconds=round(time.monotonic() - start, 3),
            details=details,
            error=error,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    def _stage_checkout(self) -> dict:
        if os.path.isdir(os.path.join(self.workspace, ".git")):
            head = run_command(["git", "rev-parse", "HEAD"], cwd=self.workspace).stdout.strip()
            return {"workspace": self.workspace, "commit": head, "cloned": False}

        if not self.config.repo_url:
            raise StageSkipped("workspace is not a git checkout and no REPO_URL is set")

        run_command(["git", "clone", self.config.repo_url, self.workspace])
        head = run_command(["git", "rev-parse", "HEAD"], cwd=self.workspace).stdout.strip()
        return {"workspace": self.workspace, "commit": head, "cloned": True}

    def _stage_install(self) -> dict:
        run_with_fallback(["npm", "ci"], ["npm", "install"], cwd=self.workspace)
        return {"node_modules": os.path.join(self.workspace, "node_modules")}

    def _stage_build(self) -> dict:
        run_command(["npm", "run", "build"], cwd=self.workspace)
        for candidate in BUILD_OUTPUT_DIRS:
            output_dir = os.path.join(self.workspace, candidate)
            if os.path.isdir(output_dir):
                return {"output_dir": output_dir}
        logger.warning("Build finished but no %s directory was found",
                       " or ".join(BUILD_OUTPUT_DIRS))
        return {"output_dir": None}

    def _stage_docker_build(self) -> dict:
        variants = [self.cycle.production, self.cycle.development]

        if self.config.parallel:
            # Both branches share one client
            self.cycle.connect()
            with ThreadPoolExecutor(max_workers=len(variants)) as pool:
                futures = [pool.submit(self.cycle.build, v) for v in variants]
                errors = []
                results = []
                for future in futures:
                    try:
                        results.append(future.result())
                    except ShipyardError as e:
                        errors.append(e)
            if errors:
                raise errors[0]
        else:
            results = [self.cycle.build(v) for v in variants]

        self.builds = results
        return {
            "parallel": self.config.parallel,
            "images": {r.variant: r.tags for r in results},
        }

    def _stage_smoke_test(self) -> dict:
        details = {}
        for variant in (self.cycle.production, self.cycle.development):
            result = self.cycle.test(variant)
            details[variant.name] = result.model_dump()
            if not result.running:
                raise ContainerStartError(result.message)
        return details

    def _stage_push(self) -> dict:
        if not self.config.push:
            raise StageSkipped("push disabled")
        if not self.config.registry_url:
            raise StageSkipped("no REGISTRY_URL configured")
        if not self.builds:
            raise StageSkipped("no images were built in this run")

        registry = self.config.registry_url.rstrip("/")
        client = self.cycle.client
        pushed = []
        for build in self.builds:
            for ref in build.tags:
                repository, tag = ref.rsplit(":", 1)
                remote = f"{registry}/{repository}"
                client.images.get(ref).tag(remote, tag=tag)
                for chunk in client.images.push(remote, tag=tag, stream=True, decode=True):
                    if isinstance(chunk, dict) and chunk.get("error"):
                        raise ShipyardError(f"Push of {remote}:{tag} failed: {chunk['error']}")
                log_success(logger, "Pushed %s:%s", remote, tag)
                pushed.append(f"{remote}:{tag}")
        return {"pushed": pushed}

    def _stage_deploy(self) -> dict:
        if not self.config.deploy:
            raise StageSkipped("deploy disabled")

        variant = self.cycle.production
        runner = self.cycle.runner
        runner.remove_if_exists(DEPLOY_CONTAINER)
        container = runner.start(
            variant,
            name=DEPLOY_CONTAINER,
            ports={f"{variant.container_port}/tcp": self.config.deploy_port},
            restart_policy={"Name": "unless-stopped"},
        )
        url = f"http://localhost:{self.config.deploy_port}"
        log_success(logger, "Deployed %s at %s", variant.image_ref, url)
        return {"container": DEPLOY_CONTAINER, "container_id": container.short_id, "url": url}

    def _stage_cleanup(self) -> dict:
        removed = self.cycle.cleanup()
        details = {"removed": removed}
        if self.config.prune_on_cleanup:
            pruned = self.cycle.client.images.prune(filters={"dangling": True})
            details["space_reclaimed"] = (pruned or {}).get("SpaceReclaimed", 0)
        return details
