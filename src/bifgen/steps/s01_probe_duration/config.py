"""Configuration for Step 01: Probe video duration."""

from pydantic import BaseModel, Field


class ProbeDurationConfig(BaseModel):
    ffprobe_bin: str = Field("ffprobe", description="ffprobe executable name or path")
    interval: float = Field(10.0, description="Seconds between thumbnails")
    timeout: float | None = Field(None, description="Probe timeout in seconds (None = wait forever)")
