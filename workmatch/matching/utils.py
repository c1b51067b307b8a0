"""Utility functions for preparing match results for downstream consumers.

This module provides helpers for building the match response payload and
structuring score rationale for logs and displays.
"""

from typing import Dict, List, Sequence

from workmatch.domain.models import Worker

from .models import MatchResult


def build_match_payload(results: Sequence[MatchResult]) -> Dict:
    """Build the response body for a successful match request.

    Args:
        results: Ranked results from WorkerMatcher.rank()

    Returns:
        Dict with a single ``matches`` key holding the annotated worker
        records in ranked order.
    """
    return {"matches": [result.to_payload() for result in results]}


def build_error_payload(message: str) -> Dict:
    """Build the response body for a failed match request."""
    return {"error": message}


def build_rationale_dict(result: MatchResult) -> Dict:
    """Build a lightweight rationale dict for one scored worker.

    Useful for logging why a worker ranked where it did.

    Args:
        result: MatchResult to explain

    Returns:
        Dict with the worker id, total score, each score component and the
        matched job skills.
    """
    breakdown = result.breakdown
    return {
        "worker_id": result.worker.id,
        "match_score": result.match_score,
        "skill_points": breakdown.skill_points,
        "location_points": breakdown.location_points,
        "experience_points": breakdown.experience_points,
        "reputation_points": breakdown.reputation_points,
        "matched_skills": list(breakdown.matched_skills),
    }


def average_rating(ratings: Sequence[int]) -> float:
    """Mean rating rounded to one decimal for display, 0.0 without reviews.

    Example:
        >>> average_rating([4, 5, 5])
        4.7
    """
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 1)


def format_match_summary(results: Sequence[MatchResult]) -> str:
    """Format ranked results as a short text table for the CLI."""
    if not results:
        return "No matching workers found"

    lines: List[str] = []
    for position, result in enumerate(results, 1):
        worker = result.worker
        name = worker.full_name or worker.id
        skills = ", ".join(result.breakdown.matched_skills) or "-"
        lines.append(
            f"{position}. {name} (score {result.match_score}) "
            f"rating {average_rating(worker.ratings)} | matched skills: {skills}"
        )
    return "\n".join(lines)


def format_worker_directory(workers: Sequence[Worker]) -> str:
    """Format the worker pool as one line per worker for the CLI."""
    if not workers:
        return "No workers registered yet."

    lines: List[str] = []
    for worker in workers:
        reviews = len(worker.ratings)
        lines.append(
            f"{worker.full_name or worker.id} [{worker.id}] "
            f"rating {average_rating(worker.ratings)} "
            f"({reviews} review{'' if reviews == 1 else 's'}) | "
            f"{worker.location or '-'} | {worker.experience} years experience | "
            f"{worker.contact} | skills: {', '.join(worker.skills) or '-'}"
        )
    return "\n".join(lines)
