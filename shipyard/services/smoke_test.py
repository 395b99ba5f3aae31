"""
Smoke Test
==========
Shallow post-start checks on a test container.

Two signals:
    - Process presence: the container is listed among running containers.
    - HTTP probe: GET on the published port answers without an error status
      (the `curl -f` contract: anything >= 400 or no answer is a miss).

A missed probe is reported, never raised. The app may still be starting
when the fixed wait window ends.
"""
import logging
from typing import Optional

import httpx

from shipyard.core.config import HTTP_PROBE_TIMEOUT
from shipyard.executor.container_runner import ContainerRunner
from shipyard.models.smoke_result import SmokeResult
from shipyard.models.variant import BuildVariant

logger = logging.getLogger(__name__)


def probe_http(url: str, timeout: float = HTTP_PROBE_TIMEOUT) -> Optional[int]:
    """Return the HTTP status for ``url``, or None if nothing answered."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        logger.debug("Probe %s failed: %s", url, e)
        return None
    return response.status_code


def is_ok_status(status: Optional[int]) -> bool:
    return status is not None and status < 400


class SmokeTester:

    def __init__(self, runner: ContainerRunner, timeout: float = HTTP_PROBE_TIMEOUT) -> None:
        self.runner = runner
        self.timeout = timeout

    def check(self, variant: BuildVariant) -> SmokeResult:
        result = SmokeResult(
            variant=variant.name,
            container_name=variant.container_name,
            url=variant.url,
        )
        result.running = self.runner.is_running(variant.container_name)

        if not result.running:
            result.message = f"Container {variant.container_name} is not running"
            return result

        if variant.probe_http:
            result.http_status = probe_http(variant.url, timeout=self.timeout)
            result.passed = is_ok_status(result.http_status)
            if result.passed:
                result.message = f"Responding with HTTP {result.http_status}"
            elif result.http_status is None:
                result.message = "No HTTP response yet"
            else:
                result.message = f"Responding with HTTP {result.http_status}"
        else:
            result.passed = True
            result.message = "Container running"

        return result
