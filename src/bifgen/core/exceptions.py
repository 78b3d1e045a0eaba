"""Exception hierarchy for BIF generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .contracts import Frame


class BifError(Exception):
    """Base exception for all bifgen errors."""


class ProbeError(BifError):
    """Raised when the video duration cannot be queried or parsed."""


class ExtractionError(BifError):
    """Raised when a single frame could not be extracted."""

    def __init__(self, message: str, timestamp: float | None = None) -> None:
        self.timestamp = timestamp
        super().__init__(message)


class DemuxError(BifError):
    """Raised when the streaming ffmpeg process exits with a non-zero status."""

    def __init__(self, returncode: int, detail: str = "") -> None:
        self.returncode = returncode
        msg = f"ffmpeg stream exited with status {returncode}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class NoFramesExtracted(BifError):
    """Raised when every frame of a job failed."""

    def __init__(self, total: int) -> None:
        self.total = total
        super().__init__(f"No frames were successfully extracted (0/{total})")


class EmptyInput(BifError, ValueError):
    """Raised when zero frames are requested or handed to the encoder."""


class InvalidInterval(BifError, ValueError):
    """Raised when the thumbnail interval is not strictly positive."""


class ExtractionTimeout(BifError, TimeoutError):
    """Raised when the job deadline expires before extraction finished."""

    def __init__(self, timeout: float, frames: list[Frame] | None = None) -> None:
        self.timeout = timeout
        self.frames = frames or []
        done = sum(1 for f in self.frames if f.data is not None)
        super().__init__(f"Frame extraction timed out after {timeout:.1f}s ({done} frames extracted)")
