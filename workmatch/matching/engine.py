"""Scoring and ranking engine for matching workers to a job posting.

This module implements the matching logic that:
1. Scores each worker independently against the job (skills, location,
   experience, reputation)
2. Sorts the pool by score, keeping pool order on ties
3. Truncates to the top candidates
"""

import logging
from typing import List, Sequence

from workmatch.domain.models import JobPosting, Worker
from workmatch.utils.text import contains_either_way, fold_label

from .models import MatchResult, ScoreBreakdown

logger = logging.getLogger(__name__)


class WorkerMatcher:
    """Ranks a pool of workers against a job posting.

    The matcher holds no per-call state; one instance can serve concurrent
    requests. Inputs are only read, never modified.
    """

    SKILL_POINTS = 10
    LOCATION_POINTS = 20
    EXPERIENCE_POINTS_PER_YEAR = 5
    RATING_MULTIPLIER = 2
    MAX_RESULTS = 3

    def __init__(self, logger_instance: logging.Logger = None):
        """Initialize WorkerMatcher.

        Args:
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def rank(self, job: JobPosting, pool: Sequence[Worker]) -> List[MatchResult]:
        """Score every worker and return the best candidates.

        Args:
            job: Job posting to match against
            pool: Candidate workers, in the order the store returned them

        Returns:
            At most MAX_RESULTS results, highest score first. Equal scores
            keep their pool order. An empty pool gives an empty list.
        """
        scored = [self.score(job, worker) for worker in pool]

        # sorted() is stable, so ties stay in pool order
        ranked = sorted(scored, key=lambda result: result.match_score, reverse=True)
        top = ranked[: self.MAX_RESULTS]

        self.logger.debug(
            f"Ranked {len(scored)} workers for job {job.id}",
            extra={
                "job_id": job.id,
                "pool_size": len(scored),
                "returned": len(top),
                "top_score": top[0].match_score if top else None,
            },
        )
        return top

    def score(self, job: JobPosting, worker: Worker) -> MatchResult:
        """Compute the match score of one worker for one job.

        Args:
            job: Job posting to match against
            worker: Worker to score

        Returns:
            MatchResult carrying the total score and its breakdown
        """
        matched_skills = self._matched_skills(job.skills_required, worker.skills)

        breakdown = ScoreBreakdown(
            skill_points=len(matched_skills) * self.SKILL_POINTS,
            location_points=(
                self.LOCATION_POINTS if self._locations_match(job.location, worker.location) else 0
            ),
            experience_points=worker.experience * self.EXPERIENCE_POINTS_PER_YEAR,
            reputation_points=self._reputation_points(worker.ratings),
            matched_skills=matched_skills,
        )
        return MatchResult(worker=worker, match_score=breakdown.total, breakdown=breakdown)

    @staticmethod
    def _matched_skills(job_skills: Sequence[str], worker_skills: Sequence[str]) -> List[str]:
        """Return the job skills matched by at least one worker skill.

        A job skill matches when it contains, or is contained in, some worker
        skill after case folding. Each job skill counts once however many
        worker skills match it.
        """
        folded_worker_skills = [fold_label(skill) for skill in worker_skills]
        matched = []
        for skill in job_skills:
            folded = fold_label(skill)
            if any(contains_either_way(folded, ws) for ws in folded_worker_skills):
                matched.append(skill)
        return matched

    @staticmethod
    def _locations_match(job_location: str, worker_location: str) -> bool:
        """Check case-insensitive bidirectional containment of two locations.

        An empty location is contained in every string, so it matches.
        """
        return contains_either_way(fold_label(job_location), fold_label(worker_location))

    @classmethod
    def _reputation_points(cls, ratings: Sequence[int]) -> int:
        """Double the mean rating and round half-up to an integer.

        Computed in integers: round_half_up(2 * total / n) equals
        floor((4 * total + n) / (2 * n)), so no float rounding can flip a
        .5 case. Workers without reviews get 0.
        """
        count = len(ratings)
        if count == 0:
            return 0
        total = sum(ratings)
        return (2 * cls.RATING_MULTIPLIER * total + count) // (2 * count)


def rank(job: JobPosting, pool: Sequence[Worker]) -> List[MatchResult]:
    """Rank a worker pool against a job with the default matcher."""
    return WorkerMatcher().rank(job, pool)
