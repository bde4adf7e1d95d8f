"""Shared test fixtures."""

import subprocess
from pathlib import Path

import pytest

from duovision.models import ProbeResult

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_probe(
    width: int = 1280,
    height: int = 720,
    duration: float | None = 24.0,
    frame_rate: str = "24/1",
    has_audio: bool = True,
) -> ProbeResult:
    num, den = frame_rate.split("/")
    return ProbeResult(
        width=width,
        height=height,
        frame_rate=frame_rate,
        fps=int(num) / int(den),
        duration=duration,
        has_audio=has_audio,
    )


class FakeFFmpeg:
    """Stands in for ffmpeg: records commands and writes the output file.

    The output is the last argument; its content names the file so tests can
    check which artifact ended up where.
    """

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.commands: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> None:
        self.commands.append(cmd)
        output = Path(cmd[-1])
        if self.fail_on and self.fail_on in output.name:
            raise subprocess.CalledProcessError(1, cmd, stderr="Invalid crop size")
        output.write_bytes(f"produced:{output.name}".encode())


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def probe_result() -> ProbeResult:
    return make_probe()


@pytest.fixture
def fake_ffmpeg() -> FakeFFmpeg:
    return FakeFFmpeg()


@pytest.fixture
def source_video(tmp_path: Path) -> Path:
    path = tmp_path / "sample.mkv"
    path.write_bytes(b"not really a video")
    return path
