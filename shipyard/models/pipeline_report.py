"""
Pipeline Report Model
=====================
Pydantic models for the per-stage record of a pipeline run.

Stage status values:
    success — stage ran and finished cleanly
    failed  — stage raised; later stages are skipped
    skipped — stage disabled, not configured, or after a failure
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


class StageResult(BaseModel):
    name: str
    status: str
    duration_seconds: float = 0.0
    details: dict[str, Any] = Field(default_factory=dict)
    error: str = ""


class PipelineReport(BaseModel):
    build_number: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None
    stages: list[StageResult] = Field(default_factory=list)
    post: list[StageResult] = Field(default_factory=list)

    @property
    def status(self) -> str:
        if any(s.status == STATUS_FAILED for s in self.stages + self.post):
            return STATUS_FAILED
        return STATUS_SUCCESS

    def stage(self, name: str) -> Optional[StageResult]:
        for result in self.stages + self.post:
            if result.name == name:
                return result
        return None
