"""Job definitions and loaders for logo batches."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .config import IMAGE_EXTENSIONS

logger = logging.getLogger(__name__)

EMPTY_URL = "None url"


@dataclass(frozen=True)
class LogoJob:
    """One logo to finish. The id is the file stem of every artifact."""

    id: int
    source_url: str = EMPTY_URL

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 0:
            raise ValueError(f"Job id must be a non-negative integer, got {self.id!r}")


JobBatch = list[LogoJob]


def load_json_jobs(json_path: str | Path) -> JobBatch:
    """
    Load a batch from a JSON array of ``{"id": ..., "url": ...}`` objects.

    Args:
        json_path: Path to the JSON job file

    Returns:
        Jobs in file order
    """
    path = Path(json_path)
    try:
        entries = json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid job file {path}: {exc}") from exc

    if not isinstance(entries, list):
        raise ValueError(f"Job file {path} must contain a JSON array")

    jobs = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or "id" not in entry:
            raise ValueError(f"Job entry #{index} in {path} has no id")
        jobs.append(LogoJob(id=entry["id"], source_url=str(entry.get("url", EMPTY_URL))))

    logger.info("Loaded %d jobs from %s", len(jobs), path)
    return jobs


def jobs_from_directory(dir_path: str | Path) -> JobBatch:
    """
    Build a batch from the images already present in a directory.

    Files qualify when their stem is an integer and they either have a known
    image extension or no extension at all.
    """
    path = Path(dir_path)
    if not path.is_dir():
        raise ValueError(f"Directory {path} does not exist")

    ids = set()
    for entry in path.iterdir():
        if not entry.is_file():
            continue
        suffix = entry.suffix.lower().lstrip(".")
        if suffix and suffix not in IMAGE_EXTENSIONS:
            continue
        stem = entry.stem if suffix else entry.name
        if stem.isdigit():
            ids.add(int(stem))

    jobs = [LogoJob(id=job_id) for job_id in sorted(ids)]
    logger.info("Created %d jobs from %s", len(jobs), path)
    return jobs
