"""Tests for S01: Probe duration step."""

import subprocess
from pathlib import Path

import pytest

from bifgen.core.exceptions import InvalidInterval, ProbeError
from bifgen.steps.s01_probe_duration.config import ProbeDurationConfig
from bifgen.steps.s01_probe_duration.contracts import ProbeDurationInput, ProbeDurationOutput
from bifgen.steps.s01_probe_duration.step import ProbeDurationStep, probe_duration

STEP_MODULE = "bifgen.steps.s01_probe_duration.step"


def _fake_run(stdout: str = "", returncode: int = 0, stderr: str = ""):
    captured = {}

    def fake(cmd, cwd=None, timeout=None, check=True, text=True, log_level=None):
        captured["cmd"] = cmd
        if check and returncode != 0:
            raise subprocess.CalledProcessError(returncode, " ".join(cmd), stdout, stderr)
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    return fake, captured


class TestProbeDuration:
    def test_parses_duration(self, monkeypatch):
        fake, captured = _fake_run("95.040000\n")
        monkeypatch.setattr(f"{STEP_MODULE}.run_command", fake)

        assert probe_duration(Path("/videos/a.mkv")) == pytest.approx(95.04)
        cmd = captured["cmd"]
        assert cmd[0] == "ffprobe"
        assert "format=duration" in cmd
        assert cmd[-1] == "/videos/a.mkv"

    def test_custom_binary(self, monkeypatch):
        fake, captured = _fake_run("1.0")
        monkeypatch.setattr(f"{STEP_MODULE}.run_command", fake)
        probe_duration(Path("a.mp4"), ffprobe_bin="/opt/ffmpeg/bin/ffprobe")
        assert captured["cmd"][0] == "/opt/ffmpeg/bin/ffprobe"

    def test_nonzero_exit(self, monkeypatch):
        fake, _ = _fake_run("", returncode=1, stderr="a.mp4: No such file or directory")
        monkeypatch.setattr(f"{STEP_MODULE}.run_command", fake)
        with pytest.raises(ProbeError, match="No such file"):
            probe_duration(Path("a.mp4"))

    @pytest.mark.parametrize("output", ["N/A", "", "duration=12", "nan", "inf"])
    def test_unparseable(self, monkeypatch, output):
        fake, _ = _fake_run(output)
        monkeypatch.setattr(f"{STEP_MODULE}.run_command", fake)
        with pytest.raises(ProbeError, match="parse duration"):
            probe_duration(Path("a.mp4"))

    def test_timeout(self, monkeypatch):
        def fake(cmd, cwd=None, timeout=None, check=True, text=True, log_level=None):
            raise subprocess.TimeoutExpired(cmd, timeout)

        monkeypatch.setattr(f"{STEP_MODULE}.run_command", fake)
        with pytest.raises(ProbeError, match="timed out"):
            probe_duration(Path("a.mp4"), timeout=1.0)

    def test_missing_binary(self, tmp_path: Path):
        with pytest.raises(ProbeError, match="Failed to start"):
            probe_duration(tmp_path / "a.mp4", ffprobe_bin=str(tmp_path / "no-ffprobe"))


class TestProbeDurationContracts:
    def test_output_schema(self):
        schema = ProbeDurationOutput.model_json_schema()
        assert "duration" in schema["properties"]
        assert "frame_count" in schema["properties"]

    def test_config_defaults(self):
        cfg = ProbeDurationConfig()
        assert cfg.ffprobe_bin == "ffprobe"
        assert cfg.interval == 10.0
        assert cfg.timeout is None


class TestProbeDurationStep:
    def test_validate_missing_video(self, data_root: Path):
        step = ProbeDurationStep(config=ProbeDurationConfig(), data_root=data_root)
        assert step.validate_inputs(ProbeDurationInput(video_path=Path("/nonexistent/video.mp4"))) is False

    def test_frame_count(self, data_root: Path, video_file: Path, monkeypatch):
        monkeypatch.setattr(f"{STEP_MODULE}.probe_duration", lambda *a, **k: 95.0)
        step = ProbeDurationStep(config=ProbeDurationConfig(interval=10), data_root=data_root)

        out = step.execute(ProbeDurationInput(video_path=video_file))
        assert out.duration == 95.0
        assert out.frame_count == 10
        assert out.interval == 10.0
        assert out.video_path == video_file

    def test_invalid_interval_before_probe(self, data_root: Path, video_file: Path, monkeypatch):
        def must_not_run(*args, **kwargs):
            raise AssertionError("ffprobe should not be started")

        monkeypatch.setattr(f"{STEP_MODULE}.probe_duration", must_not_run)
        step = ProbeDurationStep(config=ProbeDurationConfig(interval=-5), data_root=data_root)
        with pytest.raises(InvalidInterval):
            step.execute(ProbeDurationInput(video_path=video_file))
