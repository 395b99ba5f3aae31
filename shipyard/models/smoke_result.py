"""
Smoke Result Model
==================
Outcome of a shallow post-start check on a test container.

Fields:
    running      — container is listed among running containers (docker ps)
    http_status  — status code of the HTTP probe, None if not probed or unreachable
    passed       — running, and (when probed) answered with a non-error status
"""
from typing import Optional

from pydantic import BaseModel


class SmokeResult(BaseModel):
    variant: str
    container_name: str
    url: str
    running: bool = False
    http_status: Optional[int] = None
    passed: bool = False
    message: str = ""
