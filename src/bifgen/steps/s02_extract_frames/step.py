"""Step 02: Extract evenly spaced JPEG thumbnails with ffmpeg."""

from __future__ import annotations

import logging
from typing import ClassVar

from bifgen.core.contracts import ExtractionJob
from bifgen.core.step_base import BaseStep
from ._frame_source import make_frame_source
from ._scheduler import ExtractionScheduler
from .config import ExtractFramesConfig
from .contracts import ExtractFramesInput, ExtractFramesOutput

logger = logging.getLogger(__name__)


class ExtractFramesStep(BaseStep[ExtractFramesInput, ExtractFramesOutput, ExtractFramesConfig]):
    name: ClassVar[str] = "extract_frames"
    input_type: ClassVar = ExtractFramesInput
    output_type: ClassVar = ExtractFramesOutput
    config_type: ClassVar = ExtractFramesConfig

    def validate_inputs(self, inputs: ExtractFramesInput) -> bool:
        if not inputs.video_path.exists():
            logger.error(f"Video not found: {inputs.video_path}")
            return False
        if inputs.frame_count <= 0:
            logger.error(f"Nothing to extract (frame_count={inputs.frame_count})")
            return False
        return True

    def run(self, inputs: ExtractFramesInput) -> ExtractFramesOutput:
        profile = self.config.thumbnail_profile()
        source = make_frame_source(self.config.mode, profile, self.config.ffmpeg_bin)
        job = ExtractionJob(
            video_path=inputs.video_path,
            interval=inputs.interval,
            workers=self.config.workers,
            frame_count=inputs.frame_count,
        )
        logger.info(
            f"Extracting {job.frame_count} frames every {job.interval:g}s "
            f"with {source!r} (mode={self.config.mode}, workers={job.workers})"
        )

        frames = ExtractionScheduler(source).run(job, progress=self.progress, timeout=self.config.timeout)
        return ExtractFramesOutput(
            video_path=inputs.video_path,
            frames=frames,
            success_count=sum(1 for f in frames if f.ok),
            interval=job.interval,
            width=profile.width,
            height=profile.height,
        )
