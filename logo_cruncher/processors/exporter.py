"""
Final SVG assembly for finished logos.

A logo ends up either as traced vector paths or as an embedded PNG. Both
go through the same document template; only the logo layer differs.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from PIL import Image

from ..config import (
    DEFAULT_CANVAS_SIZE,
    DEFAULT_MAX_VECTOR_KB,
    DEFAULT_MIN_DOMINANT_SCORE,
    DEFAULT_SHRINK_FACTOR,
    DEFAULT_WHITE_BRIGHTNESS,
    GRAY_BACKGROUND_COLOR,
)
from ..errors import CompositionError, WriteError
from .cleanup import is_fully_transparent
from .color_analysis import DominantColor
from .vectorizer import TraceSettings, encode_png_base64, trace_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComposeSettings:
    canvas_size: int = DEFAULT_CANVAS_SIZE
    shrink_factor: float = DEFAULT_SHRINK_FACTOR
    max_vector_bytes: int = DEFAULT_MAX_VECTOR_KB * 1024
    min_dominant_score: float = DEFAULT_MIN_DOMINANT_SCORE
    white_brightness: int = DEFAULT_WHITE_BRIGHTNESS
    optimize_png: bool = True
    trace: TraceSettings = field(default_factory=TraceSettings)


@dataclass(frozen=True)
class CanvasTransform:
    """Placement of the logo layer inside the square canvas."""

    scale: float
    offset_x: float
    offset_y: float

    @classmethod
    def identity(cls) -> "CanvasTransform":
        return cls(scale=1.0, offset_x=0.0, offset_y=0.0)

    @classmethod
    def fit(cls, width: int, height: int, canvas_size: int, shrink: float) -> "CanvasTransform":
        """Scale a width x height box to fit the canvas, shrink it, and center it."""
        scale = min(canvas_size / width, canvas_size / height) * shrink
        offset_x = (canvas_size - width * scale) / 2.0
        offset_y = (canvas_size - height * scale) / 2.0
        return cls(scale=scale, offset_x=offset_x, offset_y=offset_y)

    @classmethod
    def shrink_canvas(cls, canvas_size: int, shrink: float) -> "CanvasTransform":
        """Shrink and center a canvas-sized box (the embedded image box)."""
        return cls.fit(canvas_size, canvas_size, canvas_size, shrink)

    def to_svg(self) -> str:
        return f"translate({self.offset_x:.2f}, {self.offset_y:.2f}) scale({self.scale:.2f})"


@dataclass(frozen=True)
class VectorLayer:
    paths: str
    width: int
    height: int

    kind = "vector"


@dataclass(frozen=True)
class RasterLayer:
    png_base64: str
    width: int
    height: int

    kind = "raster"


LogoLayer = Union[VectorLayer, RasterLayer]


@dataclass(frozen=True)
class OutputDocument:
    svg: str
    layer_kind: str
    transform: CanvasTransform
    background_color: tuple[int, int, int]


def choose_background_color(
    dominant: DominantColor,
    white_brightness: int = DEFAULT_WHITE_BRIGHTNESS,
) -> tuple[int, int, int]:
    """Use a neutral gray instead of a near-white dominant color."""
    if dominant.brightness > white_brightness:
        return GRAY_BACKGROUND_COLOR
    return tuple(dominant.color)


def choose_layer(
    image: Image.Image,
    dominant_score: float,
    settings: ComposeSettings = ComposeSettings(),
) -> LogoLayer:
    """
    Pick the vector or raster representation of a logo.

    The vector trace is kept only when the background was keyed out and the
    traced paths stay under the size ceiling. Otherwise the PNG is embedded.
    """
    width, height = image.size
    png_base64 = encode_png_base64(image, optimize=settings.optimize_png)
    keyed = dominant_score > settings.min_dominant_score

    # An unkeyed trace would never be used
    if not keyed:
        logger.info("Score %.2f too low for vector output, embedding PNG", dominant_score)
        return RasterLayer(png_base64=png_base64, width=width, height=height)

    try:
        paths = trace_paths(image, settings.trace)
    except CompositionError as exc:
        logger.info("Tracing failed, embedding PNG instead: %s", exc)
        return RasterLayer(png_base64=png_base64, width=width, height=height)

    vector_size = len(paths.encode("utf-8"))
    use_vector = vector_size < settings.max_vector_bytes
    logger.info(
        "PNG %d bytes, SVG %d bytes, score %.2f: using %s",
        len(png_base64),
        vector_size,
        dominant_score,
        "SVG" if use_vector else "PNG",
    )
    if use_vector:
        return VectorLayer(paths=paths, width=width, height=height)
    return RasterLayer(png_base64=png_base64, width=width, height=height)


def compute_transform(
    layer: LogoLayer,
    dominant_score: float,
    empty: bool = False,
    settings: ComposeSettings = ComposeSettings(),
) -> CanvasTransform:
    """
    Compute where the logo layer sits in the canvas.

    Args:
        layer: Chosen logo layer
        dominant_score: Share of the dominant color, decides if keying happened
        empty: True when the logo has no visible pixel left
        settings: Canvas parameters

    Returns:
        CanvasTransform for the layer's ``<g>`` element
    """
    if isinstance(layer, VectorLayer):
        return CanvasTransform.fit(layer.width, layer.height, settings.canvas_size, settings.shrink_factor)

    # An unkeyed photo already fills the canvas; an empty logo has nothing to center
    if dominant_score <= settings.min_dominant_score or empty:
        return CanvasTransform.identity()
    return CanvasTransform.shrink_canvas(settings.canvas_size, settings.shrink_factor)


def render_document(
    job_id: int,
    layer: LogoLayer,
    transform: CanvasTransform,
    background_color: tuple[int, int, int],
    canvas_size: int = DEFAULT_CANVAS_SIZE,
) -> str:
    """Serialize the canvas, background rectangle and logo layer as SVG text."""
    if isinstance(layer, VectorLayer):
        logo = f"""<!-- Curved SVG -->
    <g transform="{transform.to_svg()}">
        {layer.paths}
    </g>"""
    else:
        logo = f"""<!-- PNG RGBA as Base64 -->
    <g transform="{transform.to_svg()}">
        <image width="100%" height="100%" id="logo_image"
               preserveAspectRatio="xMidYMid meet"
               xlink:href="data:image/png;base64,{layer.png_base64}"/>
    </g>"""

    r, g, b = background_color
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg width="{canvas_size}" height="{canvas_size}" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
    <title>{job_id}</title>
    <!-- Background -->
    <rect width="100%" height="100%" id="background" fill="rgb({r},{g},{b})"/>
    <!-- Logo -->
    {logo}
</svg>
"""


def compose(
    image: Image.Image,
    job_id: int,
    dominant: DominantColor,
    settings: ComposeSettings = ComposeSettings(),
) -> OutputDocument:
    """
    Build the finished SVG document for a cleaned logo.

    Args:
        image: Keyed and trimmed RGBA image (or the untouched image when the
            background was not keyed)
        job_id: Logo id, written into the document title
        dominant: Dominant color analysis of the source image
        settings: Canvas and tracing parameters

    Returns:
        OutputDocument with the SVG text and the decisions taken
    """
    layer = choose_layer(image, dominant.score, settings)
    transform = compute_transform(layer, dominant.score, is_fully_transparent(image), settings)
    background_color = choose_background_color(dominant, settings.white_brightness)
    svg = render_document(job_id, layer, transform, background_color, settings.canvas_size)
    return OutputDocument(
        svg=svg,
        layer_kind=layer.kind,
        transform=transform,
        background_color=background_color,
    )


def write_document(document: OutputDocument, output_path: str | Path) -> Path:
    """
    Write a finished document to disk.

    Returns:
        Path of the written file
    """
    path = Path(output_path)
    try:
        path.write_text(document.svg, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Could not write {path}: {exc}") from exc
    logger.info("Saved %s", path)
    return path
