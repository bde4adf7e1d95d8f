"""Thin CLI entry points: build RunOptions and call the engine."""

import argparse
import sys
from pathlib import Path

from duovision import engine
from duovision.errors import DuoVisionError
from duovision.ffutil import fmt_seconds
from duovision.logging_utils import setup_logging
from duovision.manifest import DEFAULT_BLEND_MODE, DEFAULT_CONTRAST, RunOptions, load_manifest
from duovision.models import ProbeResult, parse_crop

USAGE_NOTES = """\
usage notes:
  For best results keep custom crop widths and heights even. Odd dimensions
  can cause encoding artifacts such as a thin colored line at the frame edge.
"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _crop_arg(value: str):
    try:
        return parse_crop(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="duovision",
        description=(
            "Duo-Vision Recomposer: extract the left and right streams of a "
            "side-by-side video, blend them and add the original audio back. "
            "Each run writes into a new timestamped output_<time> directory "
            "with a summary.txt of its parameters."
        ),
        epilog=USAGE_NOTES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="?", type=Path, metavar="input_video_file", help="Source video file")
    parser.add_argument("--dir", type=Path, help="Directory to create the output folder in (default: .)")
    parser.add_argument("--start", type=float, help="Clip start time in seconds (default: 0)")
    parser.add_argument("--length", type=float, help="Clip length in seconds (default: full duration)")
    parser.add_argument("--left-crop", type=_crop_arg, metavar="W:H:X:Y", help="Crop for the left stream (default: iw/2:ih:0:0)")
    parser.add_argument("--right-crop", type=_crop_arg, metavar="W:H:X:Y", help="Crop for the right stream (default: iw/2:ih:iw/2:0)")
    parser.add_argument("--blend-mode", type=str, help=f"FFmpeg blend mode, e.g. average, multiply, screen, darken, lighten (default: {DEFAULT_BLEND_MODE})")
    parser.add_argument("--contrast", type=float, help=f"Contrast applied to both clips before blending, 1.0 is no change (default: {DEFAULT_CONTRAST})")
    parser.add_argument("--no-audio", action="store_true", help="Create a silent video")
    parser.add_argument("--info", action="store_true", help="Print information about the video and exit")
    parser.add_argument("--manifest", "-m", type=Path, help="Load options from a JSON run manifest")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def print_probe(input_path: Path, probe: ProbeResult) -> None:
    print(f"Probing '{input_path}'...")
    print(f"  - Dimensions: {probe.width}x{probe.height}")
    print(f"  - Duration: {fmt_seconds(probe.duration)}s")
    print(f"  - Frame Rate: {probe.fps_display} fps")
    print("---")


def print_info(input_path: Path, probe: ProbeResult) -> None:
    print("--- Video Info ---")
    print(f"File: {input_path}")
    print(f"Dimensions: {probe.width}x{probe.height}")
    print(f"Duration: {fmt_seconds(probe.duration)}s")
    print(f"Frame Rate: {probe.fps_display} fps ({probe.frame_rate})")
    print(f"Audio: {'yes' if probe.has_audio else 'no'}")
    print("------------------")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)

    overrides = dict(
        input=args.input,
        dest_dir=args.dir,
        start=args.start,
        length=args.length,
        left_crop=args.left_crop,
        right_crop=args.right_crop,
        blend_mode=args.blend_mode,
        contrast=args.contrast,
        include_audio=False if args.no_audio else None,
        info_only=args.info or None,
    )

    if args.manifest:
        try:
            options = load_manifest(args.manifest, **overrides)
        except (OSError, ValueError) as e:
            parser.error(f"invalid manifest {args.manifest}: {e}")
    elif args.input:
        options = RunOptions(**{k: v for k, v in overrides.items() if v is not None})
    else:
        parser.error("the following arguments are required: input_video_file")

    try:
        probe = engine.inspect(options.input)
        print_probe(options.input, probe)

        if options.info_only:
            print_info(options.input, probe)
            return 0

        config, summary_path = engine.prepare(options, probe)
        print(f"Processing started. Output will be saved to: {config.output_dir}")
        print(summary_path.read_text(encoding="utf-8"), end="")
        print("---")

        def on_progress(stage: str, frac: float) -> None:
            print(f"  [{frac:4.0%}] {stage}")

        engine.execute(config, on_progress=on_progress)
    except (DuoVisionError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("---")
    print("Processing complete.")
    print(f"Final video is at: {config.final_path}")
    return 0

