"""I/O contracts for Step 02: Extract thumbnail frames."""

from pathlib import Path
from pydantic import BaseModel, Field

from bifgen.core.contracts import Frame


class ExtractFramesInput(BaseModel):
    video_path: Path = Field(..., description="Path to input video file")
    interval: float = Field(..., description="Seconds between thumbnails")
    frame_count: int = Field(..., description="Number of thumbnails to extract")


class ExtractFramesOutput(BaseModel):
    video_path: Path = Field(..., description="Source video file")
    frames: list[Frame] = Field(default_factory=list, description="Frames in index order, data=None on failure")
    success_count: int = Field(..., description="Number of frames extracted successfully")
    interval: float = Field(..., description="Seconds between thumbnails")
    width: int = Field(..., description="Thumbnail width used for extraction")
    height: int = Field(..., description="Thumbnail height used for extraction")
