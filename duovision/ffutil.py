"""FFmpeg/ffprobe subprocess helpers."""

import json
import math
import shutil
import subprocess
from pathlib import Path

from duovision.errors import ExternalToolError, FFmpegNotFoundError
from duovision.logging_utils import get_logger
from duovision.models import ProbeResult

logger = get_logger(__name__)


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in ("ffmpeg", "ffprobe"):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} is not installed or not on PATH")


def parse_rational(rate: str) -> float:
    """Convert an ffprobe rate like "30000/1001" to a float, 0.0 if unusable."""
    try:
        if "/" in rate:
            num, den = rate.split("/", 1)
            den_value = float(den)
            if den_value <= 0:
                return 0.0
            return float(num) / den_value
        return float(rate)
    except (TypeError, ValueError):
        return 0.0


def format_fps(rate: str) -> str:
    """Render a frame rate for display with two decimals.

    A bare number is echoed as given. A zero or malformed denominator yields
    "0.00" instead of an error.
    """
    rate = (rate or "").strip()
    parts = rate.split("/")
    if len(parts) == 1 and parts[0]:
        return parts[0]
    if len(parts) == 2:
        try:
            num, den = float(parts[0]), float(parts[1])
        except ValueError:
            return "0.00"
        if den > 0:
            return f"{num / den:.2f}"
    return "0.00"


def _parse_duration(value) -> float | None:
    # Raw elementary streams carry no container duration.
    try:
        duration = float(value)
    except (TypeError, ValueError):
        return None
    return duration if math.isfinite(duration) else None


def probe(input_path: Path) -> ProbeResult:
    """Extract frame geometry, frame rate and duration via ffprobe."""
    cmd = [
        "ffprobe",
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise ExternalToolError("ffprobe", e.returncode, e.stderr or "") from e
    data = json.loads(result.stdout)

    streams = data.get("streams", [])
    video_stream = next(
        (s for s in streams if s.get("codec_type") == "video"), None
    )
    if video_stream is None:
        raise ValueError(f"No video stream found in {input_path}")

    frame_rate = video_stream.get("r_frame_rate", "0/0")
    return ProbeResult(
        width=int(video_stream["width"]),
        height=int(video_stream["height"]),
        frame_rate=frame_rate,
        fps=parse_rational(frame_rate),
        duration=_parse_duration(data.get("format", {}).get("duration")),
        has_audio=any(s.get("codec_type") == "audio" for s in streams),
    )


def run_ffmpeg(cmd: list[str]) -> None:
    """Run one ffmpeg command, raising CalledProcessError on failure."""
    logger.debug("Running %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    if result.stderr:
        logger.debug("ffmpeg output tail: %s", result.stderr[-500:])


def fmt_seconds(seconds: float | None) -> str:
    """Format a time value compactly for ffmpeg args and filenames ("40", "12.5").

    An unknown value renders as "N/A".
    """
    if seconds is None:
        return "N/A"
    s = f"{seconds:.6f}".rstrip("0").rstrip(".")
    return s if s not in ("", "-0") else "0"
