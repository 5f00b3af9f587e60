"""Finish photographed logos into compact, centered SVG files."""

from .config import Settings
from .jobs import LogoJob, jobs_from_directory, load_json_jobs
from .orchestrator import run_batch
from .pipeline import crop_logo, process_logo

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "LogoJob",
    "jobs_from_directory",
    "load_json_jobs",
    "run_batch",
    "crop_logo",
    "process_logo",
]
