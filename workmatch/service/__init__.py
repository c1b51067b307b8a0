"""Request-level services: match requests and marketplace operations."""

from .exceptions import (
    AlreadyAssignedError,
    ApplicationNotFoundError,
    JobNotFoundError,
    MarketplaceError,
    MatchRequestError,
    MissingJobIdError,
    OfferNotPendingError,
    WorkerNotFoundError,
    WorkMatchError,
)
from .marketplace import MarketplaceService
from .matching import MatchService
from .models import MarketplaceCounts, MatchResponse

__all__ = [
    "MatchService",
    "MarketplaceService",
    "MatchResponse",
    "MarketplaceCounts",
    "WorkMatchError",
    "MatchRequestError",
    "MissingJobIdError",
    "JobNotFoundError",
    "MarketplaceError",
    "WorkerNotFoundError",
    "AlreadyAssignedError",
    "ApplicationNotFoundError",
    "OfferNotPendingError",
]
