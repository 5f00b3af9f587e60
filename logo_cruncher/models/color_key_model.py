import numpy as np
from PIL import Image

from ..config import DEFAULT_KEY_TOLERANCE
from .base import BackgroundRemover


class ColorKeyRemover(BackgroundRemover):
    """
    Background remover keying out a single reference color.

    Best for: Logos photographed on a flat background whose color has already
    been measured (see ``processors.color_analysis``).

    How it works:
    1. Compares every pixel to the reference color channel by channel
    2. Pixels within the tolerance on all three channels become transparent
    3. Every other pixel becomes fully opaque

    Note: This keys ALL matching pixels, including same-colored areas inside
    the logo.
    """

    def __init__(
        self,
        reference_color: tuple = (255, 255, 255),
        tolerance: int = DEFAULT_KEY_TOLERANCE,
    ):
        """
        Initialize the color key remover.

        Args:
            reference_color: RGB tuple of the background color to key out
            tolerance: Maximum per-channel difference treated as background (0-255)
        """
        if not 0 <= tolerance <= 255:
            raise ValueError(f"Tolerance must be within 0..255, got {tolerance}")
        self.reference_color = np.array(reference_color[:3], dtype=np.int16)
        self.tolerance = tolerance

    def key_mask(self, image: Image.Image) -> np.ndarray:
        """Return a boolean (H, W) mask, True where the pixel matches the key."""
        rgb = np.asarray(image.convert("RGB"), dtype=np.int16)
        difference = np.abs(rgb - self.reference_color)
        return np.all(difference <= self.tolerance, axis=2)

    def remove(self, image: Image.Image) -> Image.Image:
        """Key out the reference color, replacing the alpha channel."""
        arr = np.array(image.convert("RGBA"))
        mask = self.key_mask(image)

        # 0 for background, 255 for foreground
        arr[:, :, 3] = np.where(mask, 0, 255).astype(np.uint8)

        return Image.fromarray(arr)


def remove_background(
    image: Image.Image,
    reference_color: tuple,
    tolerance: int = DEFAULT_KEY_TOLERANCE,
) -> Image.Image:
    """Convenience function for color key background removal."""
    return ColorKeyRemover(reference_color, tolerance=tolerance).remove(image)
