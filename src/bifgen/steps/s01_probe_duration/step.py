"""Step 01: Query the playable duration of a video with ffprobe."""

from __future__ import annotations

import logging
import math
import subprocess
from pathlib import Path
from typing import ClassVar

from bifgen.core.contracts import compute_frame_count
from bifgen.core.exceptions import ProbeError
from bifgen.core.step_base import BaseStep
from bifgen.utils.subprocess_utils import run_command, stderr_tail
from .config import ProbeDurationConfig
from .contracts import ProbeDurationInput, ProbeDurationOutput

logger = logging.getLogger(__name__)


def probe_duration(video_path: Path, ffprobe_bin: str = "ffprobe", timeout: float | None = None) -> float:
    """Return the container duration of ``video_path`` in seconds.

    Raises:
        ProbeError: ffprobe could not start, exited non-zero, or printed
            something that is not a finite number.
    """
    cmd = [
        ffprobe_bin,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(video_path),
    ]
    try:
        result = run_command(cmd, timeout=timeout)
    except OSError as e:
        raise ProbeError(f"Failed to start {ffprobe_bin}: {e}") from e
    except subprocess.CalledProcessError as e:
        detail = stderr_tail(e) or (e.stdout or "").strip()
        raise ProbeError(f"Failed to get video duration: {detail}") from e
    except subprocess.TimeoutExpired as e:
        raise ProbeError(f"ffprobe timed out after {timeout}s") from e

    raw = result.stdout.strip()
    try:
        duration = float(raw)
    except ValueError as e:
        raise ProbeError(f"Failed to parse duration: {raw!r}") from e
    if not math.isfinite(duration):
        raise ProbeError(f"Failed to parse duration: {raw!r}")
    return duration


class ProbeDurationStep(BaseStep[ProbeDurationInput, ProbeDurationOutput, ProbeDurationConfig]):
    name: ClassVar[str] = "probe_duration"
    input_type: ClassVar = ProbeDurationInput
    output_type: ClassVar = ProbeDurationOutput
    config_type: ClassVar = ProbeDurationConfig

    def validate_inputs(self, inputs: ProbeDurationInput) -> bool:
        if not inputs.video_path.exists():
            logger.error(f"Video not found: {inputs.video_path}")
            return False
        return True

    def run(self, inputs: ProbeDurationInput) -> ProbeDurationOutput:
        # Reject a bad interval before spawning anything
        compute_frame_count(0.0, self.config.interval)

        duration = probe_duration(inputs.video_path, self.config.ffprobe_bin, self.config.timeout)
        frame_count = compute_frame_count(duration, self.config.interval)
        logger.info(f"Video duration: {duration:.0f}s, extracting {frame_count} frames")
        return ProbeDurationOutput(
            video_path=inputs.video_path,
            duration=duration,
            interval=self.config.interval,
            frame_count=frame_count,
        )
