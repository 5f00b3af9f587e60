"""Exceptions raised by the logo finishing pipeline."""


class LogoCruncherError(Exception):
    """Base class for all pipeline errors."""


class DecodeError(LogoCruncherError):
    """Raised when a raster file exists but cannot be decoded."""


class NotFoundError(LogoCruncherError, FileNotFoundError):
    """Raised when no file matches any of the probed image extensions."""


class AnalysisError(LogoCruncherError):
    """Raised when dominant color analysis gets an empty raster or no clusters."""


class CompositionError(LogoCruncherError):
    """Raised when tracing yields no usable vector output.

    Handled inside the compositor, which falls back to the embedded raster.
    """


class WriteError(LogoCruncherError, OSError):
    """Raised when an output file cannot be written."""


class JobError(LogoCruncherError):
    """Wraps the failure of a single logo job."""

    def __init__(self, job_id: int, cause: BaseException) -> None:
        super().__init__(f"Job {job_id} failed: {cause}")
        self.job_id = job_id
        self.cause = cause


class BatchError(LogoCruncherError):
    """Raised after a batch finishes when at least one job failed."""

    def __init__(self, first: JobError, failures: list[JobError], total: int) -> None:
        super().__init__(
            f"{len(failures)} of {total} jobs failed; first failure: {first}"
        )
        self.first = first
        self.failures = failures
        self.total = total
