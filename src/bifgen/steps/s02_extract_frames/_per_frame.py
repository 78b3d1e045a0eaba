"""Per-timestamp extraction: one ffmpeg process per thumbnail."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import ClassVar

from bifgen.core.exceptions import ExtractionError
from bifgen.utils.subprocess_utils import run_command, stderr_tail
from ._frame_source import FrameSource

logger = logging.getLogger(__name__)


class PerFrameExtractor(FrameSource):
    """Seek, decode a single frame, scale it and read the JPEG from stdout.

    Holds no per-call state, so one instance can serve any number of
    worker threads.
    """

    mode: ClassVar[str] = "per_frame"

    def build_command(self, video_path: Path, timestamp: float) -> list[str]:
        return [
            self.ffmpeg_bin,
            "-loglevel", "error",
            "-ss", f"{timestamp:.3f}",
            "-i", str(video_path),
            "-frames:v", "1",
            "-vf", self.profile.scale_filter(),
            "-q:v", str(self.profile.quality),
            "-f", "image2pipe",
            "-vcodec", "mjpeg",
            "pipe:1",
        ]

    def extract(self, video_path: Path, timestamp: float, timeout: float | None = None) -> bytes:
        """Return the JPEG bytes of the frame at ``timestamp`` seconds.

        Raises:
            ExtractionError: ffmpeg could not start, exited non-zero, timed
                out (the process is killed), or wrote nothing to stdout.
        """
        cmd = self.build_command(video_path, timestamp)
        try:
            result = run_command(cmd, timeout=timeout, check=False, text=False, log_level=logging.DEBUG)
        except OSError as e:
            raise ExtractionError(f"start ffmpeg: {e}", timestamp) from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionError(f"ffmpeg killed after {timeout:.1f}s", timestamp) from e

        if result.returncode != 0:
            raise ExtractionError(
                f"ffmpeg exited with status {result.returncode}: {stderr_tail(result)}", timestamp
            )
        if not result.stdout:
            raise ExtractionError("empty frame data", timestamp)
        return result.stdout
