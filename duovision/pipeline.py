"""Stage table for the crop/blend/mux workflow and the runner that executes it."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from duovision import ffutil
from duovision.config import RunConfig
from duovision.errors import ExternalToolError
from duovision.logging_utils import get_logger

logger = get_logger(__name__)

Executor = Callable[[list[str]], None]


@dataclass(frozen=True)
class Stage:
    """One step of the workflow.

    A stage without a command relocates its single input to ``output``.
    """

    number: int
    name: str
    description: str
    inputs: tuple[Path, ...]
    output: Path
    command: tuple[str, ...] | None = None


def _trim_args(config: RunConfig) -> list[str]:
    return [
        "-i", str(config.input),
        "-ss", ffutil.fmt_seconds(config.start),
        "-t", ffutil.fmt_seconds(config.length),
    ]


def blend_filter(contrast: float, blend_mode: str) -> str:
    """filter_complex that boosts contrast on both inputs, then blends them."""
    return (
        f"[0:v]eq=contrast={contrast}[lc];"
        f"[1:v]eq=contrast={contrast}[rc];"
        f"[lc][rc]blend=all_mode={blend_mode}"
    )


def build_stages(config: RunConfig) -> list[Stage]:
    """Return the ordered stages for ``config``."""
    stages: list[Stage] = []

    if config.include_audio:
        stages.append(Stage(
            number=1,
            name="extract-audio",
            description="Extracting audio",
            inputs=(config.input,),
            output=config.audio_path,
            command=(
                "ffmpeg", *_trim_args(config), "-vn", "-y", str(config.audio_path),
            ),
        ))

    for number, name, side, crop, path in (
        (2, "extract-left", "left", config.left_crop, config.left_clip_path),
        (3, "extract-right", "right", config.right_crop, config.right_clip_path),
    ):
        stages.append(Stage(
            number=number,
            name=name,
            description=f"Extracting {side} clip",
            inputs=(config.input,),
            output=path,
            command=(
                "ffmpeg", *_trim_args(config),
                "-filter:v", f"crop={crop.render()}",
                "-an", "-y", str(path),
            ),
        ))

    stages.append(Stage(
        number=4,
        name="blend",
        description="Blending silent clips",
        inputs=(config.left_clip_path, config.right_clip_path),
        output=config.merged_path,
        command=(
            "ffmpeg",
            "-i", str(config.left_clip_path),
            "-i", str(config.right_clip_path),
            "-filter_complex", blend_filter(config.contrast, config.blend_mode),
            "-y", str(config.merged_path),
        ),
    ))

    if config.include_audio:
        stages.append(Stage(
            number=5,
            name="finalize",
            description="Adding audio back",
            inputs=(config.merged_path, config.audio_path),
            output=config.final_path,
            command=(
                "ffmpeg",
                "-i", str(config.merged_path),
                "-i", str(config.audio_path),
                "-c:v", "copy", "-c:a", "copy",
                "-y", str(config.final_path),
            ),
        ))
    else:
        stages.append(Stage(
            number=5,
            name="finalize",
            description="Moving silent video into place",
            inputs=(config.merged_path,),
            output=config.final_path,
        ))

    return stages


def run_stages(
    stages: list[Stage],
    executor: Executor | None = None,
    on_progress: Callable[[str, float], None] | None = None,
) -> list[str]:
    """Run ``stages`` in order and stop at the first failure.

    Outputs of completed stages are left on disk when a later stage fails.
    Returns the names of the stages that ran.
    """
    run = executor or ffutil.run_ffmpeg
    completed: list[str] = []
    total = len(stages)

    for i, stage in enumerate(stages):
        label = f"Step {stage.number}: {stage.description}"
        logger.info("%s...", label)
        if on_progress:
            on_progress(label, i / total)

        if stage.command is None:
            stage.inputs[0].rename(stage.output)
        else:
            try:
                run(list(stage.command))
            except subprocess.CalledProcessError as e:
                stderr = e.stderr if isinstance(e.stderr, str) else (e.stderr or b"").decode(errors="replace")
                raise ExternalToolError(stage.name, e.returncode, stderr) from e
        completed.append(stage.name)

    return completed
