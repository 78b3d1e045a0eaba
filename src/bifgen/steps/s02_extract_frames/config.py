"""Configuration for Step 02: Extract thumbnail frames."""

from typing import Literal

from pydantic import BaseModel, Field

from bifgen.core.contracts import ThumbnailProfile, get_profile


class ExtractFramesConfig(BaseModel):
    ffmpeg_bin: str = Field("ffmpeg", description="ffmpeg executable name or path")
    mode: Literal["per_frame", "stream"] = Field(
        "per_frame",
        description="'per_frame' spawns one ffmpeg per timestamp, 'stream' demuxes one MJPEG stream",
    )
    workers: int = Field(1, ge=1, description="Parallel ffmpeg processes in per_frame mode")
    profile: Literal["hd", "sd"] = Field("hd", description="Thumbnail profile: hd=320x180, sd=240x160")
    width: int | None = Field(None, gt=0, description="Override profile width")
    height: int | None = Field(None, gt=0, description="Override profile height")
    quality: int | None = Field(None, ge=1, le=31, description="Override profile ffmpeg -q:v")
    timeout: float | None = Field(6000.0, gt=0, description="Deadline for the whole extraction (None = no deadline)")

    def thumbnail_profile(self) -> ThumbnailProfile:
        return get_profile(self.profile).with_overrides(self.width, self.height, self.quality)
