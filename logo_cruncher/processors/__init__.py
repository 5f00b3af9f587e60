from .cleanup import trim_transparent
from .color_analysis import ClusterSettings, DominantColor, analyze
from .exporter import CanvasTransform, ComposeSettings, OutputDocument, compose, write_document
from .loader import flatten_to_rgb, load_image, resolve_image_path
from .vectorizer import TraceSettings, encode_png_base64, trace_paths

__all__ = [
    "trim_transparent",
    "ClusterSettings",
    "DominantColor",
    "analyze",
    "CanvasTransform",
    "ComposeSettings",
    "OutputDocument",
    "compose",
    "write_document",
    "flatten_to_rgb",
    "load_image",
    "resolve_image_path",
    "TraceSettings",
    "encode_png_base64",
    "trace_paths",
]
