"""CLI entry point for bifgen.

Usage:
    bifgen generate movie.mkv -o movie.bif   # Build a BIF with default settings
    bifgen generate movie.mkv --workers 8 --profile sd
    bifgen probe movie.mkv                   # Show duration and frame count
    bifgen run movie.mkv                     # Run the YAML-configured pipeline
    bifgen info                              # Show pipeline info
"""

from __future__ import annotations

import threading
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskProgressColumn, TimeElapsedColumn
from rich.table import Table

from bifgen.core.exceptions import BifError
from bifgen.core.logging import setup_logging

app = typer.Typer(name="bifgen", help="Generate BIF scrub-bar thumbnail files from videos")
console = Console()

DEFAULT_CONFIG = Path("configs/pipeline.yaml")


class ProgressReporter:
    """Thread-safe progress callback rendering a rich progress bar."""

    def __init__(self, progress: Progress, description: str = "Extracting frames"):
        self._progress = progress
        self._description = description
        self._task = None
        self._lock = threading.Lock()

    def __call__(self, completed: int, total: int) -> None:
        with self._lock:
            if self._task is None:
                self._task = self._progress.add_task(self._description, total=total)
            self._progress.update(self._task, completed=completed, total=total)


def _progress_bar() -> Progress:
    return Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        MofNCompleteColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    )


@app.command()
def generate(
    video: Path = typer.Argument(..., help="Input video file"),
    output: Path = typer.Option(None, "--output", "-o", help="Output .bif path (default: <video>.bif)"),
    interval: float = typer.Option(10.0, "--interval", "-i", help="Seconds between thumbnails"),
    workers: int = typer.Option(1, "--workers", "-w", help="Parallel ffmpeg processes (per_frame mode)"),
    mode: str = typer.Option("per_frame", help="per_frame or stream"),
    profile: str = typer.Option("hd", help="Thumbnail profile: hd (320x180) or sd (240x160)"),
    timeout: float = typer.Option(None, help="Abort extraction after this many seconds"),
    log_level: str = typer.Option("INFO", help="Logging level"),
) -> None:
    """Generate a BIF file for one video."""
    setup_logging(log_level)
    from bifgen.core.pipeline_runner import generate_bif

    if mode not in ("per_frame", "stream"):
        console.print(f"[red]Unknown mode '{mode}' (use per_frame or stream)[/red]")
        raise typer.Exit(1)
    if profile not in ("hd", "sd"):
        console.print(f"[red]Unknown profile '{profile}' (use hd or sd)[/red]")
        raise typer.Exit(1)

    output = output or video.with_suffix(".bif")
    t0 = time.time()
    try:
        with _progress_bar() as bar:
            result = generate_bif(
                video,
                output,
                interval=interval,
                workers=workers,
                mode=mode,
                profile=profile,
                progress=ProgressReporter(bar),
                timeout=timeout,
            )
    except (BifError, OSError, ValueError) as e:
        console.print(f"[red]Failed to generate BIF: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Wrote {result.output_path}[/green] "
        f"({result.success_count}/{result.frame_count} frames, {result.file_size} bytes) "
        f"in {time.time() - t0:.1f}s"
    )


@app.command()
def probe(
    video: Path = typer.Argument(..., help="Input video file"),
    interval: float = typer.Option(10.0, "--interval", "-i", help="Seconds between thumbnails"),
) -> None:
    """Show a video's duration and how many thumbnails it needs."""
    from bifgen.core.contracts import compute_frame_count
    from bifgen.steps.s01_probe_duration.step import probe_duration

    try:
        compute_frame_count(0.0, interval)
        duration = probe_duration(video)
        frame_count = compute_frame_count(duration, interval)
    except BifError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"Duration: {duration:.3f}s")
    console.print(f"Frames at {interval:g}s: {frame_count}")


@app.command()
def run(
    video: Path = typer.Argument(..., help="Input video file"),
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
    output: Path = typer.Option(None, "--output", "-o", help="Output .bif path"),
) -> None:
    """Run the configured pipeline on one video."""
    setup_logging()
    from bifgen.core.pipeline_runner import run_pipeline

    try:
        with _progress_bar() as bar:
            results = run_pipeline(config, video, output_path=output, progress=ProgressReporter(bar))
    except (BifError, OSError, ValueError) as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(1)

    final = list(results.values())[-1] if results else None
    if final is not None:
        summary = final.model_dump_json(indent=2, exclude={"frames"})
        console.print(f"[green]Done. Output:[/green] {summary}")


@app.command()
def info(config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path")) -> None:
    """Show pipeline steps and their status."""
    from bifgen.core.pipeline_runner import load_pipeline_config

    pipeline_cfg = load_pipeline_config(config)
    table = Table(title=f"Pipeline: {pipeline_cfg.project_name}")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("Depends On", style="dim")

    for i, step in enumerate(pipeline_cfg.steps, 1):
        table.add_row(
            str(i),
            step.name,
            step.module,
            "Y" if step.enabled else "N",
            ", ".join(step.depends_on) if step.depends_on else "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
