"""Shared data types used across the recomposer."""

import ast
import math
import operator
from dataclasses import dataclass

# Names ffmpeg's crop filter exposes for the input frame size.
_DIMENSION_NAMES = {"iw": "width", "in_w": "width", "ih": "height", "in_h": "height"}

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}

CropField = int | str


@dataclass(frozen=True)
class CropRect:
    """A crop rectangle in ffmpeg ``crop=w:h:x:y`` terms.

    Each field is either a literal pixel count or an expression over the input
    frame size (``iw``/``ih``), rendered verbatim into the filter string.
    """

    width: CropField
    height: CropField
    x: CropField = 0
    y: CropField = 0

    def render(self) -> str:
        return ":".join(str(f) for f in (self.width, self.height, self.x, self.y))

    def evaluate(self, width: int, height: int) -> tuple[int, int, int, int] | None:
        """Compute pixel values for a ``width`` x ``height`` input.

        Returns None if any field uses syntax beyond plain arithmetic on
        integers and the frame-size names.
        """
        dims = {"width": width, "height": height}
        values = []
        for field_value in (self.width, self.height, self.x, self.y):
            value = _evaluate_field(field_value, dims)
            if value is None:
                return None
            values.append(value)
        return tuple(values)

    def __str__(self) -> str:
        return self.render()


LEFT_HALF = CropRect(width="iw/2", height="ih", x=0, y=0)
RIGHT_HALF = CropRect(width="iw/2", height="ih", x="iw/2", y=0)


def parse_crop(value: str) -> CropRect:
    """Parse a ``w:h:x:y`` crop string into a CropRect."""
    parts = [p.strip() for p in value.split(":")]
    if len(parts) != 4 or not all(parts):
        raise ValueError(f"crop must have the form w:h:x:y, got {value!r}")
    fields = [int(p) if p.isdigit() else p for p in parts]
    return CropRect(*fields)


def _evaluate_field(value: CropField, dims: dict[str, int]) -> int | None:
    if isinstance(value, int):
        return value
    try:
        tree = ast.parse(value, mode="eval")
    except (SyntaxError, ValueError):
        return None
    try:
        result = _evaluate_node(tree.body, dims)
        if result is None or not math.isfinite(result):
            return None
    except OverflowError:
        return None
    return int(result)


def _evaluate_node(node: ast.AST, dims: dict[str, int]) -> float | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        return node.value
    if isinstance(node, ast.Name) and node.id in _DIMENSION_NAMES:
        return dims[_DIMENSION_NAMES[node.id]]
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub):
        operand = _evaluate_node(node.operand, dims)
        return None if operand is None else -operand
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _evaluate_node(node.left, dims)
        right = _evaluate_node(node.right, dims)
        if left is None or right is None:
            return None
        if isinstance(node.op, ast.Div) and right == 0:
            return None
        return _BINARY_OPS[type(node.op)](left, right)
    return None


@dataclass(frozen=True)
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    width: int
    height: int
    frame_rate: str
    fps: float
    duration: float | None
    has_audio: bool = True

    @property
    def fps_display(self) -> str:
        from duovision.ffutil import format_fps
        return format_fps(self.frame_rate)
