"""Worker matching engine for ranking candidates against a job posting.

This module provides:
- WorkerMatcher: Service that scores and ranks a worker pool for a job
- MatchResult / ScoreBreakdown: Scored worker and the components of its score
- Utility functions for building response payloads and rationale
"""

from .engine import WorkerMatcher, rank
from .models import MatchResult, ScoreBreakdown
from .utils import (
    average_rating,
    build_error_payload,
    build_match_payload,
    build_rationale_dict,
    format_match_summary,
    format_worker_directory,
)

__all__ = [
    "WorkerMatcher",
    "rank",
    "MatchResult",
    "ScoreBreakdown",
    "average_rating",
    "build_match_payload",
    "build_error_payload",
    "build_rationale_dict",
    "format_match_summary",
    "format_worker_directory",
]
