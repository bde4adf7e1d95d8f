"""Orchestrator: probe, resolve, record and run the recomposition pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from duovision import ffutil
from duovision.config import RunConfig, resolve
from duovision.errors import InputNotFoundError, NoAudioStreamError
from duovision.logging_utils import get_logger
from duovision.manifest import RunOptions
from duovision.models import ProbeResult
from duovision.pipeline import Executor, build_stages, run_stages
from duovision.summary import write_summary

logger = get_logger(__name__)


@dataclass
class EngineResult:
    config: RunConfig
    probe: ProbeResult
    summary_path: Path
    stages_run: list[str] = field(default_factory=list)

    @property
    def output_dir(self) -> Path:
        return self.config.output_dir

    @property
    def final_path(self) -> Path:
        return self.config.final_path


def validate_input(input_path: Path) -> None:
    if not Path(input_path).is_file():
        raise InputNotFoundError(f"Input file not found at '{input_path}'")


def inspect(input_path: Path) -> ProbeResult:
    """Check dependencies, validate the input and probe it. Touches no output."""
    ffutil.check_ffmpeg()
    validate_input(input_path)
    logger.info("Probing '%s'", input_path)
    return ffutil.probe(input_path)


def prepare(
    options: RunOptions,
    probe_result: ProbeResult,
    now: datetime | None = None,
) -> tuple[RunConfig, Path]:
    """Resolve the run parameters, create the output directory and record them."""
    if options.include_audio and not probe_result.has_audio:
        raise NoAudioStreamError(
            f"No audio stream found in {options.input}; rerun with --no-audio"
        )

    config = resolve(options, probe_result, now=now)
    summary_path = write_summary(config, probe_result)
    logger.info("Processing started. Output will be saved to: %s", config.output_dir)
    return config, summary_path


def execute(
    config: RunConfig,
    executor: Executor | None = None,
    on_progress: Callable[[str, float], None] | None = None,
) -> list[str]:
    """Run every stage for ``config``; returns the names of the stages run."""
    stages_run = run_stages(build_stages(config), executor=executor, on_progress=on_progress)
    if on_progress:
        on_progress("Done", 1.0)
    logger.info("Final video is at: %s", config.final_path)
    return stages_run


def process(
    options: RunOptions,
    probe_result: ProbeResult | None = None,
    executor: Executor | None = None,
    on_progress: Callable[[str, float], None] | None = None,
    now: datetime | None = None,
) -> EngineResult:
    """Execute the full recomposition pipeline.

    Args:
        options: User options; unset values are filled from the probe.
        probe_result: Reuse an earlier probe instead of probing again.
        executor: Runs one ffmpeg argument list; defaults to the real ffmpeg.
        on_progress: Optional callback(stage_name, fraction_complete).
        now: Clock override for the output directory timestamp.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    if probe_result is None:
        _progress("Probing video metadata", 0.0)
        probe_result = inspect(options.input)

    config, summary_path = prepare(options, probe_result, now=now)

    def _stage_progress(stage: str, frac: float) -> None:
        _progress(stage, 0.05 + frac * 0.95)

    stages_run = execute(config, executor=executor, on_progress=_stage_progress)

    return EngineResult(
        config=config,
        probe=probe_result,
        summary_path=summary_path,
        stages_run=stages_run,
    )
