from .base import BackgroundRemover
from .color_key_model import ColorKeyRemover, remove_background

__all__ = [
    "BackgroundRemover",
    "ColorKeyRemover",
    "remove_background",
]
