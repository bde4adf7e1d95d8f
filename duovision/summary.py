"""Run recorder: writes the per-run summary.txt."""

from pathlib import Path

from duovision.config import RunConfig
from duovision.ffutil import fmt_seconds
from duovision.logging_utils import get_logger
from duovision.models import CropRect, ProbeResult

logger = get_logger(__name__)


def _describe_crop(crop: CropRect, probe: ProbeResult | None) -> str:
    if probe is None:
        return crop.render()
    pixels = crop.evaluate(probe.width, probe.height)
    if pixels is None:
        return crop.render()
    w, h, x, y = pixels
    return f"{crop.render()} ({w}x{h}+{x}+{y})"


def summary_lines(config: RunConfig, probe: ProbeResult | None = None) -> list[str]:
    return [
        "--- Run Summary ---",
        f"Timestamp: {config.timestamp}",
        f"Input File: {config.input}",
        f"Output Directory: {config.output_dir}",
        "--- Parameters ---",
        f"Start Time: {fmt_seconds(config.start)}s",
        f"Length: {fmt_seconds(config.length)}s",
        f"Left Crop: {_describe_crop(config.left_crop, probe)}",
        f"Right Crop: {_describe_crop(config.right_crop, probe)}",
        f"Blend Mode: {config.blend_mode}",
        f"Contrast: {config.contrast}",
        f"No Audio: {str(not config.include_audio).lower()}",
    ]


def write_summary(config: RunConfig, probe: ProbeResult | None = None) -> Path:
    """Create the output directory and write summary.txt into it."""
    config.output_dir.mkdir(parents=True, exist_ok=True)
    path = config.summary_path
    path.write_text("\n".join(summary_lines(config, probe)) + "\n", encoding="utf-8")
    logger.info("Wrote run summary to %s", path)
    return path
