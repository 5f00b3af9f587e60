import os
from dataclasses import dataclass, replace
from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
RAW_DIRNAME = "Raw"
UPSCALE_DIRNAME = "Upscale"
RESULT_DIRNAME = "Result"
CROP_DIRNAME = "Crop"
LOG_FILENAME = "logo.log"

# Known raster extensions, probed in this order when a path has none
IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp", "bmp", "ico")

# Color analysis defaults
DEFAULT_ANALYSIS_MAX_DIMENSION = 300
DEFAULT_BASE_CLUSTERS = 3
DEFAULT_PIXELS_PER_CLUSTER = 7000
DEFAULT_MAX_CLUSTERS = 8
DEFAULT_KMEANS_MAX_ITER = 100
DEFAULT_KMEANS_CONVERGE = 1.0
DEFAULT_KMEANS_SEED = 0

# Background removal defaults
DEFAULT_KEY_TOLERANCE = 30
DEFAULT_MIN_DOMINANT_SCORE = 0.5
DEFAULT_WHITE_BRIGHTNESS = 250
GRAY_BACKGROUND_COLOR = (238, 237, 241)

# Vectorization defaults
DEFAULT_VTRACER_FILTER_SPECKLE = 16
DEFAULT_VTRACER_COLOR_PRECISION = 5
DEFAULT_VTRACER_LAYER_DIFFERENCE = 16
DEFAULT_VTRACER_CORNER_THRESHOLD = 60
DEFAULT_VTRACER_LENGTH_THRESHOLD = 4.0
DEFAULT_VTRACER_MAX_ITERATIONS = 10
DEFAULT_VTRACER_SPLICE_THRESHOLD = 45
DEFAULT_VTRACER_PATH_PRECISION = 4

# Canvas defaults
DEFAULT_CANVAS_SIZE = 300
DEFAULT_SHRINK_FACTOR = 0.65
DEFAULT_MAX_VECTOR_KB = 100

# Batch defaults
DEFAULT_MAX_WORKERS = 16

ENV_PREFIX = "LOGO_CRUNCHER_"


def _env(name: str, cast, default):
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value == "":
        return default
    try:
        return cast(value)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by every job of a batch."""

    data_dir: Path = DATA_DIR
    max_workers: int = DEFAULT_MAX_WORKERS
    tolerance: int = DEFAULT_KEY_TOLERANCE
    min_dominant_score: float = DEFAULT_MIN_DOMINANT_SCORE
    white_brightness: int = DEFAULT_WHITE_BRIGHTNESS
    canvas_size: int = DEFAULT_CANVAS_SIZE
    shrink_factor: float = DEFAULT_SHRINK_FACTOR
    max_vector_kb: int = DEFAULT_MAX_VECTOR_KB
    optimize_png: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``LOGO_CRUNCHER_*`` environment variables."""
        return cls(
            data_dir=Path(_env("DATA_DIR", str, str(DATA_DIR))),
            max_workers=_env("MAX_WORKERS", int, DEFAULT_MAX_WORKERS),
            tolerance=_env("TOLERANCE", int, DEFAULT_KEY_TOLERANCE),
            min_dominant_score=_env("MIN_SCORE", float, DEFAULT_MIN_DOMINANT_SCORE),
            canvas_size=_env("CANVAS_SIZE", int, DEFAULT_CANVAS_SIZE),
            shrink_factor=_env("SHRINK", float, DEFAULT_SHRINK_FACTOR),
            max_vector_kb=_env("MAX_VECTOR_KB", int, DEFAULT_MAX_VECTOR_KB),
        )

    def override(self, **changes) -> "Settings":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def raw_dir(self) -> Path:
        return Path(self.data_dir) / RAW_DIRNAME

    @property
    def upscale_dir(self) -> Path:
        return Path(self.data_dir) / UPSCALE_DIRNAME

    @property
    def result_dir(self) -> Path:
        return Path(self.data_dir) / RESULT_DIRNAME

    @property
    def crop_dir(self) -> Path:
        return Path(self.data_dir) / CROP_DIRNAME

    @property
    def log_file(self) -> Path:
        return Path(self.data_dir) / LOG_FILENAME

    @property
    def max_vector_bytes(self) -> int:
        return self.max_vector_kb * 1024

    def ensure_dirs(self) -> None:
        """Create the raw, upscale, result and crop directories."""
        for directory in (self.raw_dir, self.upscale_dir, self.result_dir, self.crop_dir):
            directory.mkdir(parents=True, exist_ok=True)
