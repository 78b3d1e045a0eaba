"""Pipeline orchestrator: probe -> extract -> encode, from YAML or in one call."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel

from .contracts import PipelineConfig, ProgressCallback, compute_frame_count

logger = logging.getLogger(__name__)


def load_pipeline_config(config_path: Path) -> PipelineConfig:
    """Load and validate pipeline.yaml."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return PipelineConfig(**raw)


def load_step_config(config_path: Path, config_class: type[BaseModel]) -> BaseModel:
    """Load a step-specific YAML config into its Pydantic model."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return config_class(**raw)


def import_step_class(module_path: str):
    """Dynamically import a step class from its module path.

    Expects module_path like 'bifgen.steps.s01_probe_duration'
    and looks for a class ending in 'Step' in that module's step.py.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    for attr_name in dir(step_module):
        attr = getattr(step_module, attr_name)
        if (
            isinstance(attr, type)
            and hasattr(attr, "run")
            and attr_name.endswith("Step")
            and attr_name != "BaseStep"
        ):
            return attr
    raise ImportError(f"No Step class found in {module_path}.step")


def run_pipeline(
    config_path: Path,
    video_path: Path,
    output_path: Path | None = None,
    progress: ProgressCallback = None,
) -> dict[str, BaseModel]:
    """Execute the pipeline described by a config file on one video.

    Each step receives the caller's inputs merged with the outputs of the
    steps it depends on. Returns every step's output keyed by step name.
    """
    pipeline_cfg = load_pipeline_config(config_path)
    data_root = pipeline_cfg.data_root
    results: dict[str, BaseModel] = {}
    base_inputs: dict[str, Any] = {"video_path": Path(video_path), "output_path": output_path}

    enabled_steps = [s for s in pipeline_cfg.steps if s.enabled]
    logger.info(f"Pipeline '{pipeline_cfg.project_name}' with {len(enabled_steps)} steps")

    for entry in enabled_steps:
        logger.info(f"--- Step: {entry.name} ---")

        step_cls = import_step_class(entry.module)
        step_config = load_step_config(Path(entry.config_file), step_cls.config_type)
        step_instance = step_cls(config=step_config, data_root=data_root, progress=progress)

        input_data = dict(base_inputs)
        for dep in entry.depends_on:
            if dep in results:
                input_data.update(results[dep].model_dump())

        step_input = step_cls.input_type(**input_data)
        results[entry.name] = step_instance.execute(step_input)

    logger.info("Pipeline complete.")
    return results


def generate_bif(
    video_path: Path,
    output_path: Path,
    interval: float = 10.0,
    workers: int = 1,
    mode: Literal["per_frame", "stream"] = "per_frame",
    profile: Literal["hd", "sd"] = "hd",
    progress: ProgressCallback = None,
    timeout: float | None = None,
    ffmpeg_bin: str = "ffmpeg",
    ffprobe_bin: str = "ffprobe",
):
    """Build ``output_path`` from ``video_path`` without a config file.

    Returns the encode step's output (path, frame counts, size).
    """
    from bifgen.steps.s01_probe_duration.config import ProbeDurationConfig
    from bifgen.steps.s01_probe_duration.contracts import ProbeDurationInput
    from bifgen.steps.s01_probe_duration.step import ProbeDurationStep
    from bifgen.steps.s02_extract_frames.config import ExtractFramesConfig
    from bifgen.steps.s02_extract_frames.contracts import ExtractFramesInput
    from bifgen.steps.s02_extract_frames.step import ExtractFramesStep
    from bifgen.steps.s03_encode_bif.config import EncodeBifConfig
    from bifgen.steps.s03_encode_bif.contracts import EncodeBifInput
    from bifgen.steps.s03_encode_bif.step import EncodeBifStep

    # Fails with InvalidInterval before any process is spawned
    compute_frame_count(0.0, interval)

    output_path = Path(output_path)
    data_root = output_path.parent

    probe = ProbeDurationStep(
        config=ProbeDurationConfig(ffprobe_bin=ffprobe_bin, interval=interval), data_root=data_root
    ).execute(ProbeDurationInput(video_path=Path(video_path)))

    extract = ExtractFramesStep(
        config=ExtractFramesConfig(
            ffmpeg_bin=ffmpeg_bin, mode=mode, workers=max(1, workers), profile=profile, timeout=timeout
        ),
        data_root=data_root,
        progress=progress,
    ).execute(
        ExtractFramesInput(video_path=probe.video_path, interval=probe.interval, frame_count=probe.frame_count)
    )

    return EncodeBifStep(config=EncodeBifConfig(), data_root=data_root).execute(
        EncodeBifInput(**extract.model_dump(), output_path=output_path)
    )
