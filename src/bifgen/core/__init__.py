"""bifgen core: pipeline runner, base step, shared contracts, errors."""

from .step_base import BaseStep
from .contracts import (
    ExtractionJob,
    Frame,
    PipelineConfig,
    StepEntry,
    ThumbnailProfile,
    compute_frame_count,
)
from .exceptions import (
    BifError,
    DemuxError,
    EmptyInput,
    ExtractionError,
    ExtractionTimeout,
    InvalidInterval,
    NoFramesExtracted,
    ProbeError,
)
from .pipeline_runner import run_pipeline, load_pipeline_config, generate_bif
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "ExtractionJob",
    "Frame",
    "PipelineConfig",
    "StepEntry",
    "ThumbnailProfile",
    "compute_frame_count",
    "BifError",
    "DemuxError",
    "EmptyInput",
    "ExtractionError",
    "ExtractionTimeout",
    "InvalidInterval",
    "NoFramesExtracted",
    "ProbeError",
    "run_pipeline",
    "load_pipeline_config",
    "generate_bif",
    "setup_logging",
]
