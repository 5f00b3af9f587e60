import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..config import IMAGE_EXTENSIONS
from ..errors import DecodeError, NotFoundError

logger = logging.getLogger(__name__)


def resolve_image_path(path: str | Path, extensions: tuple = IMAGE_EXTENSIONS) -> Path:
    """
    Find the file for an image path that may lack an extension.

    The path is used as-is when it exists, otherwise each known extension is
    tried on it in order and the first existing file wins.
    """
    path = Path(path)
    if path.is_file():
        return path

    for ext in extensions:
        candidate = path.with_name(f"{path.name}.{ext}")
        if candidate.is_file():
            return candidate

    raise NotFoundError(f"No image found for {path} (tried: {', '.join(extensions)})")


def load_image(path: str | Path) -> Image.Image:
    """
    Load and fully decode an image.

    Args:
        path: Image path, with or without extension

    Returns:
        Decoded PIL Image detached from the file
    """
    resolved = resolve_image_path(path)
    try:
        with Image.open(resolved) as img:
            img.load()
            image = img.copy()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(f"Could not decode image {resolved}: {exc}") from exc

    logger.info("Loaded image %s size %dx%d mode %s", resolved, image.width, image.height, image.mode)
    return image


def flatten_to_rgb(image: Image.Image) -> Image.Image:
    """
    Convert an image to RGB, turning every non-opaque pixel white.

    Partially transparent pixels are not blended; anything short of full
    opacity is treated as background.
    """
    if image.mode == "PA" or (image.mode == "P" and "transparency" in image.info):
        image = image.convert("RGBA")

    bands = image.getbands()
    # Alpha is the last band: "A" straight, "a" premultiplied (La, RGBa)
    if bands[-1] not in ("A", "a"):
        return image.convert("RGB")

    if len(bands) == 4:
        color = Image.merge("RGB", image.split()[:3])
    else:
        color = image.getchannel(bands[0]).convert("RGB")

    opaque = image.getchannel(bands[-1]).point(lambda a: 255 if a == 255 else 0)
    flat = Image.new("RGB", image.size, (255, 255, 255))
    flat.paste(color, mask=opaque)
    return flat
