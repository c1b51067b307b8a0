"""Data models for the worker matching engine.

Per-worker scores are kept together with the breakdown that produced them so
callers can explain a ranking without recomputing it.
"""

from dataclasses import dataclass, field
from typing import List

from workmatch.domain.models import Worker


@dataclass(frozen=True)
class ScoreBreakdown:
    """Additive components of a match score.

    Attributes:
        skill_points: 10 per job skill matched by at least one worker skill
        location_points: 20 if the locations contain each other, else 0
        experience_points: 5 per year of experience
        reputation_points: Mean rating doubled and rounded half-up (0 without reviews)
        matched_skills: Job skills that were matched, in job order
    """

    skill_points: int = 0
    location_points: int = 0
    experience_points: int = 0
    reputation_points: int = 0
    matched_skills: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            self.skill_points
            + self.location_points
            + self.experience_points
            + self.reputation_points
        )


@dataclass(frozen=True)
class MatchResult:
    """A worker annotated with its match score for one job.

    Attributes:
        worker: The scored worker (never modified by the matcher)
        match_score: Total integer score
        breakdown: Components that add up to match_score
    """

    worker: Worker
    match_score: int
    breakdown: ScoreBreakdown

    def to_payload(self) -> dict:
        """Render the worker record annotated with matchScore.

        The worker keeps the joined shape the boundary returns: profile name
        under ``profiles`` and ratings under ``reviews``.
        """
        worker = self.worker
        return {
            "id": worker.id,
            "user_id": worker.user_id,
            "skills": list(worker.skills),
            "experience": worker.experience,
            "location": worker.location,
            "contact": worker.contact,
            "profile_pic_url": worker.profile_pic_url,
            "created_at": worker.created_at.isoformat() if worker.created_at else None,
            "profiles": {"full_name": worker.full_name},
            "reviews": [{"rating": rating} for rating in worker.ratings],
            "matchScore": self.match_score,
        }
