"""I/O contracts for Step 03: Encode BIF file."""

from pathlib import Path
from pydantic import BaseModel, Field

from bifgen.core.contracts import Frame


class EncodeBifInput(BaseModel):
    video_path: Path = Field(..., description="Source video, used to name the default output")
    frames: list[Frame] = Field(default_factory=list, description="Frames in index order")
    interval: float = Field(..., description="Seconds between thumbnails")
    width: int = Field(320, description="Thumbnail width written to the header")
    height: int = Field(180, description="Thumbnail height written to the header")
    output_path: Path | None = Field(None, description="Destination .bif (None = <data_root>/<video stem>.bif)")


class EncodeBifOutput(BaseModel):
    output_path: Path = Field(..., description="Written BIF file")
    frame_count: int = Field(..., description="Frames in the index (absent ones included)")
    success_count: int = Field(..., description="Frames with a JPEG payload")
    interval_ms: int = Field(..., description="Interval stored in the header")
    file_size: int = Field(..., description="Total BIF size in bytes")
