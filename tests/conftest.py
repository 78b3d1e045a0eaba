"""Shared pytest fixtures for bifgen tests."""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from bifgen.core.contracts import PROFILES
from bifgen.core.exceptions import ExtractionError
from bifgen.steps.s02_extract_frames._per_frame import PerFrameExtractor


def jpeg(payload_size: int, fill: int = 0x11) -> bytes:
    """Fake JPEG: SOI + payload free of FF bytes + EOI."""
    return b"\xff\xd8" + bytes([fill]) * payload_size + b"\xff\xd9"


class StubExtractor(PerFrameExtractor):
    """Deterministic per-frame source: frame i is ``jpeg(size_fn(i))``."""

    def __init__(self, interval: float = 10.0, fail: set[int] | None = None, size_fn=None, delay: float = 0.0):
        super().__init__(PROFILES["hd"], ffmpeg_bin="ffmpeg-stub")
        self.interval = interval
        self.fail = fail or set()
        self.size_fn = size_fn or (lambda i: 100 + i)
        self.delay = delay
        self.calls: list[float] = []
        self._lock = threading.Lock()

    def extract(self, video_path: Path, timestamp: float, timeout: float | None = None) -> bytes:
        with self._lock:
            self.calls.append(timestamp)
        index = int(round(timestamp / self.interval))
        if self.delay:
            time.sleep(self.delay)
        if index in self.fail:
            raise ExtractionError("stub failure", timestamp)
        return jpeg(self.size_fn(index), fill=index % 0x7F)


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    """Placeholder video; ffmpeg/ffprobe are always faked in unit tests."""
    video = tmp_path / "movie.mp4"
    video.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return video


@pytest.fixture
def stub_extractor():
    return StubExtractor


@pytest.fixture
def make_jpeg():
    return jpeg
