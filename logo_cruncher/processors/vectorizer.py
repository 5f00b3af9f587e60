"""
VTracer-based tracing and PNG embedding for finished logos.

The tracer settings are fixed tuning constants rather than values derived
per image: a stable trace across very different inputs matters more than
the best possible trace of any single one.
"""

import base64
import io
import re
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path

import vtracer
from PIL import Image

from ..config import (
    DEFAULT_VTRACER_COLOR_PRECISION,
    DEFAULT_VTRACER_CORNER_THRESHOLD,
    DEFAULT_VTRACER_FILTER_SPECKLE,
    DEFAULT_VTRACER_LAYER_DIFFERENCE,
    DEFAULT_VTRACER_LENGTH_THRESHOLD,
    DEFAULT_VTRACER_MAX_ITERATIONS,
    DEFAULT_VTRACER_PATH_PRECISION,
    DEFAULT_VTRACER_SPLICE_THRESHOLD,
)
from ..errors import CompositionError

_PATH_RE = re.compile(r"<path\b[^>]*/>")


@dataclass(frozen=True)
class TraceSettings:
    """vtracer parameters, passed through as keyword arguments."""

    colormode: str = "color"
    hierarchical: str = "stacked"
    mode: str = "spline"
    filter_speckle: int = DEFAULT_VTRACER_FILTER_SPECKLE
    color_precision: int = DEFAULT_VTRACER_COLOR_PRECISION
    layer_difference: int = DEFAULT_VTRACER_LAYER_DIFFERENCE
    corner_threshold: int = DEFAULT_VTRACER_CORNER_THRESHOLD
    length_threshold: float = DEFAULT_VTRACER_LENGTH_THRESHOLD
    max_iterations: int = DEFAULT_VTRACER_MAX_ITERATIONS
    splice_threshold: int = DEFAULT_VTRACER_SPLICE_THRESHOLD
    path_precision: int = DEFAULT_VTRACER_PATH_PRECISION


def encode_png(image: Image.Image, optimize: bool = True) -> bytes:
    """
    Encode an image as PNG bytes.

    Args:
        image: PIL Image to encode
        optimize: Run Pillow's lossless PNG optimization pass

    Returns:
        PNG file contents
    """
    buf = io.BytesIO()
    if optimize:
        image.save(buf, format="PNG", optimize=True, compress_level=9)
    else:
        image.save(buf, format="PNG")
    return buf.getvalue()


def encode_png_base64(image: Image.Image, optimize: bool = True) -> str:
    """Encode an image as base64 PNG text for a data URI."""
    return base64.b64encode(encode_png(image, optimize=optimize)).decode("ascii")


def trace_paths(image: Image.Image, settings: TraceSettings = TraceSettings()) -> str:
    """
    Trace an image into SVG path elements using vtracer.

    Args:
        image: RGBA PIL Image to trace
        settings: vtracer parameters

    Returns:
        Concatenated ``<path .../>`` elements, each carrying its own fill
        and translate transform

    Raises:
        CompositionError: if vtracer fails or produces no paths
    """
    if image.width < 2 or image.height < 2:
        raise CompositionError(f"Image too small to trace: {image.width}x{image.height}")

    with tempfile.TemporaryDirectory() as temp_dir:
        input_path = Path(temp_dir) / "logo.png"
        output_path = Path(temp_dir) / "logo.svg"
        image.convert("RGBA").save(input_path, "PNG")

        try:
            vtracer.convert_image_to_svg_py(
                str(input_path),
                str(output_path),
                **asdict(settings),
            )
            svg_content = output_path.read_text(encoding="utf-8")
        except Exception as exc:
            # vtracer raises untyped errors from its Rust core
            raise CompositionError(f"vtracer failed: {exc}") from exc

    paths = _PATH_RE.findall(svg_content)
    if not paths:
        raise CompositionError("vtracer produced no paths")

    return "".join(paths)
