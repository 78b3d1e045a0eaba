"""Subprocess helpers for the external video tools (ffmpeg, ffprobe)."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
    check: bool = True,
    text: bool = True,
    log_level: int = logging.INFO,
) -> subprocess.CompletedProcess:
    """Run an external command with logging and error handling.

    With ``text=False`` stdout/stderr are returned as bytes (ffmpeg image pipes).
    A command exceeding ``timeout`` is killed and ``TimeoutExpired`` propagates.
    ``log_level`` applies to the "Running:" line; callers spawning one process
    per frame pass DEBUG.
    """
    cmd_str = " ".join(cmd)
    logger.log(log_level, f"Running: {cmd_str}")

    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=text,
        timeout=timeout,
        check=False,
    )

    if text and result.stdout:
        logger.debug(f"stdout: {result.stdout[-500:]}")
    if result.stderr:
        logger.debug(f"stderr: {_tail(result.stderr)}")

    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode, cmd_str, result.stdout, result.stderr
        )
    return result


def _tail(output: str | bytes, limit: int = 500) -> str:
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return output[-limit:]


def stderr_tail(result: subprocess.CompletedProcess | subprocess.CalledProcessError, limit: int = 300) -> str:
    """Last chunk of a process's stderr, decoded and stripped, for error messages."""
    if not result.stderr:
        return ""
    return _tail(result.stderr, limit).strip()
