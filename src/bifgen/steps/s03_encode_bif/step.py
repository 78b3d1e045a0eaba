"""Step 03: Serialize extracted frames into a BIF file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

from bifgen.core.step_base import BaseStep
from ._bif_writer import write_bif_file
from .config import EncodeBifConfig
from .contracts import EncodeBifInput, EncodeBifOutput

logger = logging.getLogger(__name__)


class EncodeBifStep(BaseStep[EncodeBifInput, EncodeBifOutput, EncodeBifConfig]):
    name: ClassVar[str] = "encode_bif"
    input_type: ClassVar = EncodeBifInput
    output_type: ClassVar = EncodeBifOutput
    config_type: ClassVar = EncodeBifConfig

    def validate_inputs(self, inputs: EncodeBifInput) -> bool:
        if inputs.output_path is not None and inputs.output_path.is_dir():
            logger.error(f"Output path is a directory: {inputs.output_path}")
            return False
        return True

    def output_path_for(self, inputs: EncodeBifInput) -> Path:
        if inputs.output_path is not None:
            return inputs.output_path
        return self.data_root / f"{inputs.video_path.stem}{self.config.output_suffix}"

    def run(self, inputs: EncodeBifInput) -> EncodeBifOutput:
        width = self.config.width or inputs.width
        height = self.config.height or inputs.height
        output_path = write_bif_file(
            inputs.frames, self.output_path_for(inputs), inputs.interval, width, height
        )
        return EncodeBifOutput(
            output_path=output_path,
            frame_count=len(inputs.frames),
            success_count=sum(1 for f in inputs.frames if f.ok),
            interval_ms=int(round(inputs.interval * 1000)),
            file_size=output_path.stat().st_size,
        )
