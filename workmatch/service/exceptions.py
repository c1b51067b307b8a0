"""Exceptions raised by the match and marketplace services."""


class WorkMatchError(Exception):
    """Base exception for request-level failures.

    Messages are user-facing: the request boundary returns str(error) as is.
    """

    pass


class MatchRequestError(WorkMatchError):
    """A match request could not be served."""

    pass


class MissingJobIdError(MatchRequestError):
    """The request did not carry a job identifier.

    Raised before any lookup is attempted.
    """

    def __init__(self, message: str = "Job ID is required") -> None:
        super().__init__(message)


class JobNotFoundError(MatchRequestError):
    """No job exists with the requested identifier."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class MarketplaceError(WorkMatchError):
    """A marketplace write (offer, response, registration) was rejected."""

    pass


class WorkerNotFoundError(MarketplaceError):
    """No worker exists with the given identifier."""

    def __init__(self, worker_id: str) -> None:
        super().__init__(f"Worker {worker_id} not found")
        self.worker_id = worker_id


class AlreadyAssignedError(MarketplaceError):
    """The job was already offered to this worker."""

    def __init__(self, job_id: str, worker_id: str) -> None:
        super().__init__("This worker has already been offered this job.")
        self.job_id = job_id
        self.worker_id = worker_id


class ApplicationNotFoundError(MarketplaceError):
    """No application exists with the given identifier."""

    def __init__(self, application_id: str) -> None:
        super().__init__(f"Application {application_id} not found")
        self.application_id = application_id


class OfferNotPendingError(MarketplaceError):
    """The offer was already accepted or declined."""

    def __init__(self, application_id: str, status: str) -> None:
        super().__init__(f"Application {application_id} is already {status}")
        self.application_id = application_id
        self.status = status
