from __future__ import annotations


class JobSwipeError(Exception):
    """Base class for failures reported to API callers."""

    kind = "error"
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDirectionError(JobSwipeError):
    kind = "validation"
    status_code = 400
    default_message = "direction must be 'left' or 'right'"


class JobNotFoundError(JobSwipeError):
    kind = "not_found"
    status_code = 404
    default_message = "Job not found in JobSearch API"

    def __init__(self, job_id: str, message: str | None = None) -> None:
        self.job_id = job_id
        super().__init__(message)


class UpstreamError(JobSwipeError):
    """The JobSearch API could not be reached or answered with an error."""

    kind = "upstream"
    status_code = 502
    default_message = "JobSearch API error"

    def __init__(self, message: str | None = None, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)
