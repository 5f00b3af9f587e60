"""
Per-logo finishing recipe.

Load low-res -> load high-res -> analyze -> key and trim (when the dominant
color is trustworthy) -> compose -> write.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from .config import Settings
from .errors import JobError
from .jobs import LogoJob
from .models.color_key_model import ColorKeyRemover
from .processors.cleanup import trim_transparent
from .processors.color_analysis import DominantColor, analyze
from .processors.exporter import ComposeSettings, compose, write_document
from .processors.loader import flatten_to_rgb, load_image
from .processors.vectorizer import encode_png

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobReport:
    """What a finished job produced, for logging and tests."""

    job_id: int
    output_path: Path
    layer_kind: str
    dominant_color: tuple[int, int, int]
    score: float
    cluster_count: int
    keyed: bool


def compose_settings(settings: Settings) -> ComposeSettings:
    return ComposeSettings(
        canvas_size=settings.canvas_size,
        shrink_factor=settings.shrink_factor,
        max_vector_bytes=settings.max_vector_bytes,
        min_dominant_score=settings.min_dominant_score,
        white_brightness=settings.white_brightness,
        optimize_png=settings.optimize_png,
    )


def key_and_trim(image: Image.Image, dominant: DominantColor, settings: Settings) -> tuple[Image.Image, bool]:
    """
    Remove the dominant background color and trim the transparent border.

    Skipped when the dominant color's share is too low to be the background.

    Returns:
        Tuple of (RGBA image, whether keying happened)
    """
    image = image.convert("RGBA")
    if dominant.score <= settings.min_dominant_score:
        return image, False

    remover = ColorKeyRemover(dominant.color, tolerance=settings.tolerance)
    image = trim_transparent(remover.remove(image))
    logger.info("Trimmed logo to %dx%d", image.width, image.height)
    return image, True


def process_logo(job: LogoJob, settings: Settings) -> JobReport:
    """
    Finish one logo into an SVG in the result directory.

    Raises:
        JobError: wrapping whatever stopped the job
    """
    small_path = settings.raw_dir / str(job.id)
    big_path = settings.upscale_dir / str(job.id)
    output_path = settings.result_dir / f"{job.id}.svg"

    logger.info("Job %d started: %s %s", job.id, small_path, big_path)
    try:
        small = flatten_to_rgb(load_image(small_path))
        big = flatten_to_rgb(load_image(big_path))

        dominant = analyze(small)
        logger.info(
            "Job %d dominant color RGB%s share %d%% (k=%d)",
            job.id,
            dominant.color,
            dominant.percent,
            dominant.cluster_count,
        )

        logo, keyed = key_and_trim(big, dominant, settings)
        document = compose(logo, job.id, dominant, compose_settings(settings))
        write_document(document, output_path)
    except Exception as exc:
        raise JobError(job.id, exc) from exc

    logger.info("Job %d finished: %s layer -> %s", job.id, document.layer_kind, output_path)
    return JobReport(
        job_id=job.id,
        output_path=output_path,
        layer_kind=document.layer_kind,
        dominant_color=dominant.color,
        score=dominant.score,
        cluster_count=dominant.cluster_count,
        keyed=keyed,
    )


def crop_logo(job: LogoJob, settings: Settings) -> JobReport:
    """
    Key out and trim the background of an upscaled logo, saving a PNG.

    Uses the high-res image for both analysis and keying.
    """
    big_path = settings.upscale_dir / str(job.id)
    output_path = settings.crop_dir / f"{job.id}.png"

    try:
        big = flatten_to_rgb(load_image(big_path))
        dominant = analyze(big)
        logo, keyed = key_and_trim(big, dominant, settings)
        output_path.write_bytes(encode_png(logo, optimize=settings.optimize_png))
    except Exception as exc:
        raise JobError(job.id, exc) from exc

    logger.info("Job %d cropped -> %s", job.id, output_path)
    return JobReport(
        job_id=job.id,
        output_path=output_path,
        layer_kind="png",
        dominant_color=dominant.color,
        score=dominant.score,
        cluster_count=dominant.cluster_count,
        keyed=keyed,
    )
