"""
Pipeline Config
===============
Loads the optional pipeline file (shipyard.yml) on top of environment
defaults.

File format:
    stages:            # subset of the known stages, run in canonical order
      - checkout
      - install
      - build
      - docker-build
      - smoke-test
    parallel: true     # build production and development images concurrently
    push: true         # needs REGISTRY_URL (or registry_url below)
    registry_url: registry.example.com
    deploy: false
    deploy_port: 80
    prune_on_cleanup: false

A missing file means "all stages, environment defaults". An unknown
stage name is an error, not a silent skip.
"""
import os
import logging
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from shipyard.core import config
from shipyard.core.constants import PIPELINE_STAGES
from shipyard.core.errors import PipelineConfigError

logger = logging.getLogger(__name__)


class PipelineConfig(BaseModel):
    stages: list[str] = Field(default_factory=lambda: list(PIPELINE_STAGES))
    parallel: bool = True
    push: bool = Field(default_factory=lambda: bool(config.REGISTRY_URL))
    registry_url: Optional[str] = Field(default_factory=lambda: config.REGISTRY_URL)
    deploy: bool = Field(default_factory=lambda: config.DEPLOY_ENABLED)
    deploy_port: int = Field(default_factory=lambda: config.DEPLOY_PORT)
    prune_on_cleanup: bool = Field(default_factory=lambda: config.PRUNE_ON_CLEANUP)
    repo_url: Optional[str] = Field(default_factory=lambda: config.REPO_URL)
    workspace: str = Field(default_factory=lambda: config.BUILD_CONTEXT)
    build_number: Optional[str] = Field(default_factory=lambda: config.BUILD_NUMBER)

    @field_validator("stages")
    @classmethod
    def stages_must_be_known(cls, v: list[str]) -> list[str]:
        unknown = [s for s in v if s not in PIPELINE_STAGES]
        if unknown:
            raise ValueError(
                f"Unknown stage(s): {', '.join(unknown)}. "
                f"Known stages: {', '.join(PIPELINE_STAGES)}"
            )
        # Canonical order regardless of how the file lists them
        return [s for s in PIPELINE_STAGES if s in v]

    @field_validator("build_number", mode="before")
    @classmethod
    def build_number_as_str(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    def is_enabled(self, stage: str) -> bool:
        return stage in self.stages


def parse_pipeline_config(content: str, source: str = "<string>") -> PipelineConfig:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PipelineConfigError(f"Failed to parse YAML {source}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PipelineConfigError(f"{source} must contain a mapping at the top level")

    try:
        return PipelineConfig(**data)
    except ValidationError as e:
        raise PipelineConfigError(f"Invalid pipeline config {source}: {e}") from e


def load_pipeline_config(path: Optional[str] = None) -> PipelineConfig:
    """Read ``path`` (default PIPELINE_FILE) if it exists, else return defaults."""
    path = path or config.PIPELINE_FILE
    if not os.path.isfile(path):
        logger.debug("No pipeline file at %s, using defaults", path)
        return PipelineConfig()

    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    logger.info("Loaded pipeline config from %s", path)
    return parse_pipeline_config(content, source=path)
