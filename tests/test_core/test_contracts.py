"""Tests for shared contracts: frame counts, jobs, thumbnail profiles."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from bifgen.core.contracts import (
    PROFILES,
    ExtractionJob,
    Frame,
    compute_frame_count,
    get_profile,
)
from bifgen.core.exceptions import BifError, EmptyInput, InvalidInterval


class TestFrameCount:
    @pytest.mark.parametrize(
        "duration, interval, expected",
        [
            (95.0, 10.0, 10),
            (100.0, 10.0, 11),
            (9.99, 10.0, 1),
            (0.0, 10.0, 1),
            (7.5, 2.5, 4),
            (3600.0, 1.0, 3601),
        ],
    )
    def test_floor_plus_one(self, duration, interval, expected):
        assert compute_frame_count(duration, interval) == expected

    @pytest.mark.parametrize("interval", [0, -1, -0.5, float("nan")])
    def test_invalid_interval(self, interval):
        with pytest.raises(InvalidInterval):
            compute_frame_count(95.0, interval)

    def test_negative_duration_is_empty(self):
        with pytest.raises(EmptyInput):
            compute_frame_count(-25.0, 10.0)

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidInterval, ValueError)
        assert issubclass(EmptyInput, BifError)


class TestExtractionJob:
    def test_from_duration(self):
        job = ExtractionJob.from_duration(Path("/tmp/v.mp4"), 95.0, 10.0, workers=4)
        assert job.frame_count == 10
        assert job.workers == 4
        assert job.timestamp(0) == 0.0
        assert job.timestamp(9) == 90.0

    def test_workers_clamped(self):
        job = ExtractionJob.from_duration(Path("/tmp/v.mp4"), 30.0, 10.0, workers=0)
        assert job.workers == 1

    def test_frozen(self):
        job = ExtractionJob.from_duration(Path("/tmp/v.mp4"), 30.0, 10.0)
        with pytest.raises(ValidationError):
            job.frame_count = 99

    def test_rejects_zero_frames(self):
        with pytest.raises(ValidationError):
            ExtractionJob(video_path=Path("/tmp/v.mp4"), interval=10.0, frame_count=0)


class TestFrame:
    def test_absent(self):
        frame = Frame(index=3)
        assert frame.data is None
        assert frame.ok is False

    def test_present(self):
        assert Frame(index=0, data=b"\xff\xd8\xff\xd9").ok is True

    def test_negative_index(self):
        with pytest.raises(ValidationError):
            Frame(index=-1)


class TestThumbnailProfile:
    def test_hd_defaults(self):
        hd = get_profile("hd")
        assert (hd.width, hd.height, hd.quality) == (320, 180, 10)
        assert hd.scale_filter() == "scale=320:180"

    def test_sd_flags(self):
        sd = PROFILES["sd"]
        assert (sd.width, sd.height, sd.quality) == (240, 160, 4)
        assert sd.scale_filter() == (
            "scale=240:160:force_original_aspect_ratio=decrease:flags=bicubic:sws_dither=none"
        )

    def test_overrides(self):
        custom = get_profile("hd").with_overrides(width=480, quality=3)
        assert (custom.width, custom.height, custom.quality) == (480, 180, 3)
        # Presets are not mutated
        assert PROFILES["hd"].width == 320

    def test_no_overrides_returns_same(self):
        hd = get_profile("hd")
        assert hd.with_overrides() is hd

    def test_unknown_profile(self):
        with pytest.raises(ValueError, match="Unknown thumbnail profile"):
            get_profile("4k")

