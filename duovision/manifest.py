"""Run options and the JSON run manifest, the contract between CLI/API and engine."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from duovision.models import CropRect, parse_crop

DEFAULT_BLEND_MODE = "average"
DEFAULT_CONTRAST = 1.2

MANIFEST_KEYS = {
    "input", "dir", "start", "length", "left_crop", "right_crop",
    "blend_mode", "contrast", "audio",
}


@dataclass(frozen=True)
class RunOptions:
    """User-supplied options before probe-dependent defaults are filled in."""

    input: Path
    dest_dir: Path = Path(".")
    start: float = 0.0
    length: float | None = None
    left_crop: CropRect | None = None
    right_crop: CropRect | None = None
    blend_mode: str = DEFAULT_BLEND_MODE
    contrast: float = DEFAULT_CONTRAST
    include_audio: bool = True
    info_only: bool = False


def options_from_dict(data: dict[str, Any], **overrides: Any) -> RunOptions:
    """Build RunOptions from manifest-style keys.

    ``overrides`` are RunOptions field names and win over ``data``.
    """
    unknown = set(data) - MANIFEST_KEYS
    if unknown:
        raise ValueError(f"Unknown manifest keys: {', '.join(sorted(unknown))}")

    fields: dict[str, Any] = {}
    if "input" in data:
        fields["input"] = Path(data["input"])
    if "dir" in data:
        fields["dest_dir"] = Path(data["dir"])
    if "start" in data:
        fields["start"] = float(data["start"])
    if data.get("length") is not None:
        fields["length"] = float(data["length"])
    if data.get("left_crop"):
        fields["left_crop"] = parse_crop(data["left_crop"])
    if data.get("right_crop"):
        fields["right_crop"] = parse_crop(data["right_crop"])
    if "blend_mode" in data:
        fields["blend_mode"] = str(data["blend_mode"])
    if "contrast" in data:
        fields["contrast"] = float(data["contrast"])
    if "audio" in data:
        if not isinstance(data["audio"], bool):
            raise ValueError(f"'audio' must be true or false, got {data['audio']!r}")
        fields["include_audio"] = data["audio"]

    fields.update({k: v for k, v in overrides.items() if v is not None})
    if "input" not in fields:
        raise ValueError("Manifest must contain an 'input' field")
    return RunOptions(**fields)


def load_manifest(path: str | Path, **overrides: Any) -> RunOptions:
    """Load run options from a JSON manifest file."""
    path = Path(path)
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("Manifest must be a JSON object")
    return options_from_dict(data, **overrides)
