"""
Build Result Model
Outcome of one `docker build --target ...` call.
"""
from pydantic import BaseModel, Field


class BuildResult(BaseModel):
    variant: str
    tags: list[str] = Field(default_factory=list)
    image_id: str = ""
    duration_seconds: float = 0.0
    error: str = ""

    @property
    def success(self) -> bool:
        return not self.error and bool(self.tags)
