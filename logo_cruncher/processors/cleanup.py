import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def trim_transparent(im: Image.Image, pad: int = 0) -> Image.Image:
    """
    Crop transparent areas around the image content.

    A fully transparent image is returned as a 1x1 transparent pixel so that
    later scaling math always has a non-empty box to work with.

    Args:
        im: PIL Image with transparency
        pad: Padding to keep around the content (default 0px)

    Returns:
        Cropped RGBA PIL Image
    """
    im = im.convert("RGBA")
    arr = np.array(im)
    alpha = arr[:, :, 3]
    ys, xs = np.where(alpha > 0)

    if len(xs) == 0:
        return Image.new("RGBA", (1, 1), (0, 0, 0, 0))

    x0, x1 = xs.min(), xs.max()
    y0, y1 = ys.min(), ys.max()

    x0 = max(0, x0 - pad)
    y0 = max(0, y0 - pad)
    x1 = min(arr.shape[1] - 1, x1 + pad)
    y1 = min(arr.shape[0] - 1, y1 + pad)

    box = (int(x0), int(y0), int(x1) + 1, int(y1) + 1)
    logger.debug("Trimming transparent border to box %s", box)
    return im.crop(box)


def is_fully_transparent(im: Image.Image) -> bool:
    """Return True if no pixel of the image has a non-zero alpha."""
    if im.mode != "RGBA":
        return False
    return not np.any(np.asarray(im)[:, :, 3])
