"""Parameter resolution: turns RunOptions plus a probe into an immutable RunConfig."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from duovision.errors import UnknownDurationError
from duovision.ffutil import fmt_seconds
from duovision.manifest import RunOptions
from duovision.models import LEFT_HALF, RIGHT_HALF, CropRect, ProbeResult

TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S"
VIDEO_EXT = ".mkv"
AUDIO_EXT = ".aac"
FINAL_BASENAME = "FINAL_VIDEO"


@dataclass(frozen=True)
class RunConfig:
    """Fully resolved parameters for one run, shared by every stage."""

    input: Path
    output_dir: Path
    timestamp: str
    start: float
    length: float
    length_specified: bool
    left_crop: CropRect
    right_crop: CropRect
    blend_mode: str
    contrast: float
    include_audio: bool

    @property
    def summary_path(self) -> Path:
        return self.output_dir / "summary.txt"

    @property
    def audio_path(self) -> Path:
        return self.output_dir / f"master_audio{AUDIO_EXT}"

    @property
    def left_clip_path(self) -> Path:
        return self.output_dir / f"left_clip{VIDEO_EXT}"

    @property
    def right_clip_path(self) -> Path:
        return self.output_dir / f"right_clip{VIDEO_EXT}"

    @property
    def merged_path(self) -> Path:
        return self.output_dir / f"merged_crisp_average{VIDEO_EXT}"

    @property
    def final_path(self) -> Path:
        return self.output_dir / final_filename(self)


def final_filename(config: RunConfig) -> str:
    """Build ``FINAL_VIDEO[_silent][_start-S][_length-L].mkv``.

    The length suffix only appears when the user asked for a length, not when
    it was defaulted from the probed duration.
    """
    name = FINAL_BASENAME
    if not config.include_audio:
        name += "_silent"
    if config.start != 0:
        name += f"_start-{fmt_seconds(config.start)}"
    if config.length_specified:
        name += f"_length-{fmt_seconds(config.length)}"
    return name + VIDEO_EXT


def output_dir_for(dest_dir: Path, timestamp: str) -> Path:
    """Return ``<dest>/output_<timestamp>``, suffixed ``_1``, ``_2``... if taken."""
    candidate = dest_dir / f"output_{timestamp}"
    counter = 1
    while candidate.exists():
        candidate = dest_dir / f"output_{timestamp}_{counter}"
        counter += 1
    return candidate


def resolve(
    options: RunOptions,
    probe: ProbeResult,
    now: datetime | None = None,
) -> RunConfig:
    """Fill unset options from the probe and derive the output location."""
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    length_specified = options.length is not None
    if not length_specified and probe.duration is None:
        raise UnknownDurationError(
            f"ffprobe reported no duration for {options.input}; pass --length explicitly"
        )

    return RunConfig(
        input=options.input,
        output_dir=output_dir_for(options.dest_dir, timestamp),
        timestamp=timestamp,
        start=options.start,
        length=options.length if length_specified else probe.duration,
        length_specified=length_specified,
        left_crop=options.left_crop or LEFT_HALF,
        right_crop=options.right_crop or RIGHT_HALF,
        blend_mode=options.blend_mode,
        contrast=options.contrast,
        include_audio=options.include_audio,
    )
