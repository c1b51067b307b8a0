"""Data models for match request results."""

from dataclasses import dataclass, field
from typing import List

from workmatch.domain.models import JobPosting
from workmatch.matching.models import MatchResult


@dataclass
class MatchResponse:
    """
    Outcome of one match request.

    Attributes:
        request_id: Identifier carried in every log line of the request
        job: The job the pool was ranked against
        matches: Ranked results, best first (at most three)
        pool_size: Number of workers that were scored
        duration_seconds: Time spent serving the request
    """

    request_id: str
    job: JobPosting
    matches: List[MatchResult] = field(default_factory=list)
    pool_size: int = 0
    duration_seconds: float = 0.0

    @property
    def top_score(self):
        """Best score in the response, or None when nobody was ranked."""
        return self.matches[0].match_score if self.matches else None


@dataclass
class MarketplaceCounts:
    """Totals shown on the marketplace overview."""

    workers: int = 0
    jobs: int = 0
