#!/usr/bin/env python3
"""Generate a synthetic side-by-side test video.

Produces a ~12-second 640x240 video whose left and right halves are two
different 320x240 streams, with a tone track:
  left   test pattern, then blue
  right  red, then a moving gradient
  audio  440 Hz for 6s, 880 Hz for 6s
"""

import subprocess
import sys
from pathlib import Path


def generate_test_video(output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)

    audio_filter = (
        "sine=f=440:d=6[a0];"
        "sine=f=880:d=6[a1];"
        "[a0][a1]concat=n=2:v=0:a=1[aout]"
    )

    video_filter = (
        "testsrc=s=320x240:d=6:r=30[l0];"
        "color=c=blue:s=320x240:d=6:r=30[l1];"
        "[l0][l1]concat=n=2:v=1:a=0[left];"
        "color=c=red:s=320x240:d=6:r=30[r0];"
        "gradients=s=320x240:d=6:r=30[r1];"
        "[r0][r1]concat=n=2:v=1:a=0[right];"
        "[left][right]hstack=inputs=2[vout]"
    )

    filter_complex = audio_filter + ";" + video_filter

    cmd = [
        "ffmpeg", "-y",
        "-filter_complex", filter_complex,
        "-map", "[vout]",
        "-map", "[aout]",
        "-c:v", "libx264",
        "-pix_fmt", "yuv420p",
        "-c:a", "aac",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, check=True)
    print(f"Generated: {output}")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic_sbs.mkv")
    generate_test_video(out)
