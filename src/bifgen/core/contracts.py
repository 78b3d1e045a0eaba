"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import EmptyInput, InvalidInterval

# (completed, total) -> None. Implementations holding mutable state must
# synchronize themselves.
ProgressCallback = Optional[Callable[[int, int], None]]


class Frame(BaseModel):
    """One thumbnail slot. ``data`` is None when extraction failed."""

    index: int = Field(..., ge=0)
    data: bytes | None = None

    @property
    def ok(self) -> bool:
        return self.data is not None


class ThumbnailProfile(BaseModel):
    """Output resolution and ffmpeg scaling/quality flags for thumbnails."""

    name: str = "hd"
    width: int = Field(320, gt=0)
    height: int = Field(180, gt=0)
    quality: int = Field(10, ge=1, le=31, description="ffmpeg -q:v value (lower is better)")
    scale_flags: str | None = Field(None, description="Extra swscale flags, e.g. 'bicubic:sws_dither=none'")
    preserve_aspect: bool = Field(False, description="Fit inside width x height instead of stretching")

    def scale_filter(self) -> str:
        parts = [f"scale={self.width}:{self.height}"]
        if self.preserve_aspect:
            parts.append("force_original_aspect_ratio=decrease")
        if self.scale_flags:
            parts.append(f"flags={self.scale_flags}")
        return ":".join(parts)

    def with_overrides(
        self, width: int | None = None, height: int | None = None, quality: int | None = None
    ) -> ThumbnailProfile:
        updates = {k: v for k, v in {"width": width, "height": height, "quality": quality}.items() if v is not None}
        return self.model_copy(update=updates) if updates else self


PROFILES: dict[str, ThumbnailProfile] = {
    "hd": ThumbnailProfile(name="hd", width=320, height=180, quality=10),
    "sd": ThumbnailProfile(
        name="sd",
        width=240,
        height=160,
        quality=4,
        scale_flags="bicubic:sws_dither=none",
        preserve_aspect=True,
    ),
}


def get_profile(name: str) -> ThumbnailProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown thumbnail profile '{name}' (choose from {sorted(PROFILES)})") from None


def compute_frame_count(duration: float, interval: float) -> int:
    """Number of thumbnails for a video: floor(duration / interval) + 1."""
    if not interval > 0:
        raise InvalidInterval(f"Interval must be positive, got {interval}")
    count = math.floor(duration / interval) + 1
    if count <= 0:
        raise EmptyInput(f"Video too short for interval {interval}s (duration {duration:.3f}s)")
    return count


class ExtractionJob(BaseModel):
    """Everything a single extraction run needs. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    video_path: Path
    interval: float = Field(..., gt=0)
    workers: int = Field(1, ge=1)
    frame_count: int = Field(..., gt=0)

    @classmethod
    def from_duration(
        cls, video_path: Path, duration: float, interval: float, workers: int = 1
    ) -> ExtractionJob:
        frame_count = compute_frame_count(duration, interval)
        return cls(video_path=video_path, interval=interval, workers=max(1, workers), frame_count=frame_count)

    def timestamp(self, index: int) -> float:
        return index * self.interval


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration loaded from pipeline.yaml."""

    project_name: str = "bifgen"
    data_root: Path = Path("./data")
    steps: list[StepEntry] = Field(default_factory=list)


class StepEntry(BaseModel):
    """One entry in the pipeline step list."""

    name: str
    module: str
    config_file: str
    depends_on: list[str] = Field(default_factory=list)
    enabled: bool = True


# Fix forward reference
PipelineConfig.model_rebuild()
