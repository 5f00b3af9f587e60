"""
Dominant color detection using LAB-space K-Means.

The dominant color is the centroid of the most populous cluster. For logo
photography this is the background: the code trusts the top cluster and
does not try to tell a flat background from a large flat foreground.
"""

from dataclasses import dataclass, replace

import cv2
import numpy as np
from PIL import Image
from sklearn.cluster import KMeans

from ..config import (
    DEFAULT_ANALYSIS_MAX_DIMENSION,
    DEFAULT_BASE_CLUSTERS,
    DEFAULT_KMEANS_CONVERGE,
    DEFAULT_KMEANS_MAX_ITER,
    DEFAULT_KMEANS_SEED,
    DEFAULT_MAX_CLUSTERS,
    DEFAULT_PIXELS_PER_CLUSTER,
)
from ..errors import AnalysisError


@dataclass(frozen=True)
class ClusterSettings:
    """Tuning knobs of the dominant color clustering."""

    max_dimension: int = DEFAULT_ANALYSIS_MAX_DIMENSION
    base_clusters: int = DEFAULT_BASE_CLUSTERS
    pixels_per_cluster: int = DEFAULT_PIXELS_PER_CLUSTER
    max_clusters: int = DEFAULT_MAX_CLUSTERS
    max_iter: int = DEFAULT_KMEANS_MAX_ITER
    converge: float = DEFAULT_KMEANS_CONVERGE
    seed: int = DEFAULT_KMEANS_SEED


@dataclass(frozen=True)
class DominantColor:
    """Result of dominant color analysis."""

    color: tuple[int, int, int]
    score: float
    brightness: int
    cluster_count: int

    @property
    def percent(self) -> int:
        return int(self.score * 100)

    def with_color(self, color: tuple[int, int, int]) -> "DominantColor":
        """Return a copy carrying another color but the same score."""
        return replace(self, color=tuple(color))


def cluster_count(n_pixels: int, settings: ClusterSettings = ClusterSettings()) -> int:
    """Adaptive k: a small baseline plus one cluster per block of pixels, capped."""
    k = settings.base_clusters + n_pixels // settings.pixels_per_cluster
    return max(1, min(k, settings.max_clusters))


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """
    Convert 8-bit sRGB pixels to CIE LAB.

    Float input makes OpenCV linearize the sRGB gamma and return true LAB
    (L in 0..100, a/b signed) instead of the 8-bit rescaled variant.

    Args:
        rgb: (N, 3) uint8 array

    Returns:
        (N, 3) float32 array
    """
    scaled = (rgb.astype(np.float32) / 255.0).reshape(1, -1, 3)
    return cv2.cvtColor(scaled, cv2.COLOR_RGB2Lab).reshape(-1, 3)


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert (N, 3) LAB values back to 8-bit sRGB."""
    lab = lab.astype(np.float32).reshape(1, -1, 3)
    rgb = cv2.cvtColor(lab, cv2.COLOR_Lab2RGB).reshape(-1, 3)
    return np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8)


def _prepare_pixels(image: Image.Image, max_dimension: int) -> np.ndarray:
    rgb = image.convert("RGB")
    if max(rgb.size) > max_dimension:
        rgb = rgb.copy()
        rgb.thumbnail((max_dimension, max_dimension), Image.Resampling.BILINEAR)
    return np.asarray(rgb, dtype=np.uint8).reshape(-1, 3)


def analyze(image: Image.Image, settings: ClusterSettings = ClusterSettings()) -> DominantColor:
    """
    Find the dominant color of an image.

    Args:
        image: PIL Image in any mode (alpha is ignored)
        settings: Clustering parameters

    Returns:
        DominantColor with the winning cluster's color, share and brightness
    """
    if image.width == 0 or image.height == 0:
        raise AnalysisError("Cannot analyze an empty image")

    pixels = _prepare_pixels(image, settings.max_dimension)
    lab_pixels = rgb_to_lab(pixels)

    # K-Means cannot place more centroids than there are distinct colors
    distinct = len(np.unique(lab_pixels, axis=0))
    k = min(cluster_count(len(lab_pixels), settings), distinct)

    kmeans = KMeans(
        n_clusters=k,
        init="k-means++",
        n_init=1,
        max_iter=settings.max_iter,
        tol=_relative_tolerance(lab_pixels, settings.converge),
        random_state=settings.seed,
    )
    labels = kmeans.fit_predict(lab_pixels)
    counts = np.bincount(labels, minlength=k)

    if counts.sum() == 0:
        raise AnalysisError("Clustering produced no clusters")

    # Largest share first; ties go to the lower cluster index
    order = np.argsort(-counts, kind="stable")
    winner = order[0]

    color = tuple(int(c) for c in lab_to_rgb(kmeans.cluster_centers_[winner])[0])
    brightness = int(round(sum(color) / 3.0))
    score = float(counts[winner]) / float(counts.sum())

    return DominantColor(color=color, score=score, brightness=brightness, cluster_count=k)


def _relative_tolerance(lab_pixels: np.ndarray, converge: float) -> float:
    """
    Translate an absolute LAB centroid shift into scikit-learn's tolerance.

    scikit-learn stops when the squared centroid shift falls below
    ``tol * mean(variance)``; solving for ``tol`` keeps the stop at a shift of
    about ``converge`` LAB units.
    """
    variance = float(np.mean(np.var(lab_pixels, axis=0)))
    if variance <= 0:
        return 0.0
    return (converge ** 2) / variance
