"""
Image Builder
=============
Builds one target of the multi-stage Dockerfile and tags the result.

Equivalent shell:
    docker build --target <target> -t <image>:<tag> <context>
    docker tag <image>:<tag> <image>:<build_number>     # when a build number is set

TAGGING RULE:
    The moving tag (normally "latest") always points at the newest build.
    The build-number tag is immutable: one build number, one image.
    Re-building therefore moves only the moving tag; no containers are touched.

FAILURE:
    A failed build raises BuildError. Callers treat it as fatal, like
    `set -e` in a shell script.
"""
import time
import logging
from typing import Optional

import docker
from docker.errors import APIError, BuildError as DockerBuildError

from shipyard.core.errors import BuildError
from shipyard.models.build_result import BuildResult
from shipyard.models.variant import BuildVariant

logger = logging.getLogger(__name__)


def _collect_build_log(chunks) -> str:
    lines = []
    for chunk in chunks or []:
        if not isinstance(chunk, dict):
            continue
        text = chunk.get("stream") or chunk.get("error") or ""
        if text:
            lines.append(text.rstrip("\n"))
    return "\n".join(lines)


def build_image(
    client: docker.DockerClient,
    variant: BuildVariant,
    context_path: str,
    build_number: Optional[str] = None,
) -> BuildResult:
    """
    Build ``variant.target`` from ``context_path`` and tag it.

    Parameters
    ----------
    client : docker.DockerClient
        Connected SDK client.
    variant : BuildVariant
        Target, repository and moving tag to build.
    context_path : str
        Directory holding the Dockerfile.
    build_number : str | None
        Extra immutable tag. Skipped when None or equal to the moving tag.

    Returns
    -------
    BuildResult
        Tags applied, image id and wall-clock duration.

    Raises
    ------
    BuildError
        When the daemon rejects the build or a build step fails.
    """
    start = time.monotonic()
    logger.info("Building %s image...", variant.name)

    try:
        image, chunks = client.images.build(
            path=context_path,
            target=variant.target,
            tag=variant.image_ref,
            rm=True,
        )
    except DockerBuildError as e:
        build_log = _collect_build_log(e.build_log)
        logger.debug("Build log for %s:\n%s", variant.name, build_log)
        raise BuildError(variant.name, e.msg, build_log) from e
    except APIError as e:
        raise BuildError(variant.name, str(e)) from e

    logger.debug("Build log for %s:\n%s", variant.name, _collect_build_log(chunks))

    tags = [variant.image_ref]
    if build_number and build_number != variant.tag:
        try:
            image.tag(variant.image, tag=build_number)
        except APIError as e:
            raise BuildError(variant.name, f"tagging {build_number} failed: {e}") from e
        tags.append(f"{variant.image}:{build_number}")

    result = BuildResult(
        variant=variant.name,
        tags=tags,
        image_id=image.short_id,
        duration_seconds=round(time.monotonic() - start, 3),
    )
    logger.debug(
        "Build complete | variant=%s | tags=%s | time=%.2fs",
        variant.name, ",".join(tags), result.duration_seconds,
    )
    return result
