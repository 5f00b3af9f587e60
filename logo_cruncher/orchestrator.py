"""Bounded-concurrency batch runner for logo jobs."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

from tqdm import tqdm

from .config import DEFAULT_MAX_WORKERS, Settings
from .errors import BatchError, JobError
from .jobs import JobBatch, LogoJob
from .pipeline import JobReport, process_logo

logger = logging.getLogger(__name__)

JobWorker = Callable[[LogoJob, Settings], JobReport]


class ProgressCounter:
    """Thread-safe count of completed jobs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def run_batch(
    jobs: JobBatch,
    worker: JobWorker = process_logo,
    settings: Settings | None = None,
    max_concurrency: int = DEFAULT_MAX_WORKERS,
    show_progress: bool = True,
    counter: ProgressCounter | None = None,
) -> list[JobReport]:
    """
    Run a worker over every job with at most ``max_concurrency`` in flight.

    Failed jobs never cancel their siblings. Once all jobs are done, the
    first failure (in completion order) is raised as a BatchError.

    Args:
        jobs: Jobs to run
        worker: Per-job callable, ``process_logo`` by default
        settings: Shared settings (default: from environment)
        max_concurrency: Worker pool size
        show_progress: Display a tqdm progress bar
        counter: Optional externally owned progress counter

    Returns:
        Reports of all jobs in submission order
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

    settings = settings or Settings.from_env()
    counter = counter or ProgressCounter()
    reports: dict[int, JobReport] = {}
    failures: list[JobError] = []

    with tqdm(total=len(jobs), desc="Finishing logos", unit="logo", disable=not show_progress) as bar:
        with ThreadPoolExecutor(max_workers=max_concurrency) as executor:
            futures = {
                executor.submit(worker, job, settings): index
                for index, job in enumerate(jobs)
            }
            for future in as_completed(futures):
                index = futures[future]
                job = jobs[index]
                try:
                    reports[index] = future.result()
                except JobError as exc:
                    logger.error("%s", exc)
                    failures.append(exc)
                except Exception as exc:
                    logger.exception("Job %d crashed", job.id)
                    failures.append(JobError(job.id, exc))
                done = counter.increment()
                bar.update(1)
                logger.info("Progress %d/%d", done, len(jobs))

    if failures:
        raise BatchError(failures[0], failures, len(jobs))

    logger.info("Batch finished: %d jobs", len(jobs))
    return [reports[index] for index in sorted(reports)]
