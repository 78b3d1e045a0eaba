"""Common base for the two ways of acquiring thumbnail JPEGs from ffmpeg."""

from __future__ import annotations

from abc import ABC
from typing import ClassVar

from bifgen.core.contracts import ThumbnailProfile


class FrameSource(ABC):
    """Acquires JPEG thumbnails for a video through an external ffmpeg.

    ``PerFrameExtractor`` runs one ffmpeg per timestamp and can be driven
    from many threads. ``StreamDemuxer`` runs a single ffmpeg emitting an
    MJPEG stream and splits it into frames.
    """

    mode: ClassVar[str] = ""

    def __init__(self, profile: ThumbnailProfile, ffmpeg_bin: str = "ffmpeg"):
        self.profile = profile
        self.ffmpeg_bin = ffmpeg_bin

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.profile.width}x{self.profile.height}, "
            f"q={self.profile.quality}, bin={self.ffmpeg_bin!r})"
        )


def make_frame_source(mode: str, profile: ThumbnailProfile, ffmpeg_bin: str = "ffmpeg") -> FrameSource:
    """Build the frame source selected by ``mode`` ('per_frame' or 'stream')."""
    from ._per_frame import PerFrameExtractor
    from ._stream_demux import StreamDemuxer

    for cls in (PerFrameExtractor, StreamDemuxer):
        if cls.mode == mode:
            return cls(profile, ffmpeg_bin)
    raise ValueError(f"Unknown extraction mode '{mode}'")
