"""I/O contracts for Step 01: Probe video duration."""

from pathlib import Path
from pydantic import BaseModel, Field


class ProbeDurationInput(BaseModel):
    video_path: Path = Field(..., description="Path to input video file")


class ProbeDurationOutput(BaseModel):
    video_path: Path = Field(..., description="Probed video file")
    duration: float = Field(..., description="Playable duration in seconds")
    interval: float = Field(..., description="Seconds between thumbnails")
    frame_count: int = Field(..., description="Number of thumbnails: floor(duration / interval) + 1")
