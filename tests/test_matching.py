"""Unit tests for the matching engine.

Tests the WorkerMatcher service for:
- Skill points (bidirectional, case-insensitive containment per job skill)
- Location bonus (awarded once)
- Experience and reputation points, including half-up rounding
- Ranking order, stability and truncation
- Payload, rationale and summary helpers
"""

from datetime import datetime, timezone

import pytest

from workmatch.domain.models import JobPosting, Worker
from workmatch.matching import (
    MatchResult,
    ScoreBreakdown,
    WorkerMatcher,
    average_rating,
    build_error_payload,
    build_match_payload,
    build_rationale_dict,
    format_match_summary,
    format_worker_directory,
    rank,
)


def make_job(skills=None, location="New York", **overrides):
    fields = {
        "id": "job-1",
        "employer_id": "emp-1",
        "title": "Build a booking page",
        "description": "React front end for an existing API",
        "skills_required": skills if skills is not None else ["React", "Node.js"],
        "location": location,
        "budget": 1500,
        "deadline_days": 14,
    }
    fields.update(overrides)
    return JobPosting(**fields)


def make_worker(
    worker_id, skills=None, location="Nowhere", experience=0, ratings=None, **overrides
):
    fields = {
        "id": worker_id,
        "user_id": f"user-{worker_id}",
        "full_name": f"Worker {worker_id}",
        "skills": skills or [],
        "location": location,
        "experience": experience,
        "contact": f"{worker_id}@example.com",
        "ratings": ratings or [],
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Worker(**fields)


@pytest.fixture
def matcher():
    return WorkerMatcher()


@pytest.fixture
def job():
    return make_job()


class TestScoring:
    """Tests for WorkerMatcher.score()."""

    def test_reference_scenario(self, matcher, job):
        """Skill, location, experience and reputation add up."""
        worker_a = make_worker(
            "a",
            skills=["react", "express"],
            location="New York, USA",
            experience=3,
            ratings=[5, 5],
        )

        result = matcher.score(job, worker_a)

        assert result.match_score == 55
        assert result.breakdown.skill_points == 10
        assert result.breakdown.location_points == 20
        assert result.breakdown.experience_points == 15
        assert result.breakdown.reputation_points == 10
        assert result.breakdown.matched_skills == ["React"]

    def test_reputation_and_experience_only(self, matcher, job):
        worker = make_worker("b", skills=["Vue"], location="Lisbon", experience=2, ratings=[4, 5])

        result = matcher.score(job, worker)

        assert result.breakdown.reputation_points == 9
        assert result.match_score == 19

    def test_nothing_in_common_scores_zero(self, matcher, job):
        worker = make_worker("c", skills=["Figma"], location="Tel Aviv")

        assert matcher.score(job, worker).match_score == 0

    def test_skill_match_ignores_case(self, matcher):
        job = make_job(skills=["React"])
        worker = make_worker("d", skills=["react"])

        result = matcher.score(job, worker)

        assert result.breakdown.skill_points == 10

    def test_skill_match_is_bidirectional(self, matcher):
        """A job skill matches when contained in, or containing, a worker skill."""
        job = make_job(skills=["React", "PostgreSQL"])
        worker = make_worker("e", skills=["React Native", "SQL"])

        result = matcher.score(job, worker)

        assert result.breakdown.matched_skills == ["React", "PostgreSQL"]
        assert result.breakdown.skill_points == 20

    def test_job_skill_counts_once(self, matcher):
        """Several worker skills matching one job skill still give 10 points."""
        job = make_job(skills=["React"])
        worker = make_worker("f", skills=["React", "React Native", "react-router"])

        assert matcher.score(job, worker).breakdown.skill_points == 10

    def test_duplicate_job_skills_each_count(self, matcher):
        job = make_job(skills=["React", "react"])
        worker = make_worker("g", skills=["React"])

        assert matcher.score(job, worker).breakdown.skill_points == 20

    def test_location_bonus_awarded_once(self, matcher):
        job = make_job(skills=[], location="York")
        worker = make_worker("h", location="New York, York County")

        result = matcher.score(job, worker)

        assert result.breakdown.location_points == 20
        assert result.match_score == 20

    def test_location_match_is_bidirectional(self, matcher):
        job = make_job(skills=[], location="Brooklyn, New York")
        worker = make_worker("i", location="new york")

        assert matcher.score(job, worker).breakdown.location_points == 20

    def test_empty_location_matches_any_location(self, matcher):
        job = make_job(skills=[], location="")
        worker = make_worker("j", location="Lisbon")

        assert matcher.score(job, worker).breakdown.location_points == 20

    @pytest.mark.parametrize(
        "ratings, expected",
        [
            ([], 0),
            ([5], 10),
            ([4, 5], 9),
            ([1, 2, 2, 2], 4),
            ([1, 1, 1, 2], 3),
            ([3, 3, 4], 7),
        ],
    )
    def test_reputation_rounds_half_up(self, matcher, ratings, expected):
        assert WorkerMatcher._reputation_points(ratings) == expected

    def test_score_does_not_modify_inputs(self, matcher, job):
        worker = make_worker("k", skills=["react"], ratings=[4])
        job_before = job.model_dump()
        worker_before = worker.model_dump()

        matcher.score(job, worker)

        assert job.model_dump() == job_before
        assert worker.model_dump() == worker_before


class TestRanking:
    """Tests for WorkerMatcher.rank()."""

    def test_empty_pool(self, matcher, job):
        assert matcher.rank(job, []) == []

    @pytest.mark.parametrize("pool_size", [1, 2, 3, 4, 7])
    def test_length_is_at_most_three(self, matcher, job, pool_size):
        pool = [make_worker(str(i), experience=i) for i in range(pool_size)]

        assert len(matcher.rank(job, pool)) == min(3, pool_size)

    def test_sorted_by_score_descending(self, matcher, job):
        pool = [
            make_worker("low", experience=1),
            make_worker("high", experience=10),
            make_worker("mid", experience=5),
        ]

        ranked = matcher.rank(job, pool)

        assert [r.worker.id for r in ranked] == ["high", "mid", "low"]
        assert [r.match_score for r in ranked] == [50, 25, 5]

    def test_ties_keep_pool_order(self, matcher, job):
        pool = [
            make_worker("first", experience=2),
            make_worker("second", experience=2),
            make_worker("best", experience=4),
            make_worker("third", experience=2),
        ]

        ranked = matcher.rank(job, pool)

        assert [r.worker.id for r in ranked] == ["best", "first", "second"]

    def test_all_zero_scores_keep_pool_order(self, matcher, job):
        pool = [make_worker(name) for name in ["w1", "w2", "w3", "w4"]]

        ranked = matcher.rank(job, pool)

        assert [r.worker.id for r in ranked] == ["w1", "w2", "w3"]
        assert all(r.match_score == 0 for r in ranked)

    def test_module_level_rank_uses_default_matcher(self, job):
        pool = [make_worker("x", skills=["Node.js"]), make_worker("y", skills=["react"])]

        ranked = rank(job, pool)

        assert [r.worker.id for r in ranked] == ["x", "y"]

    def test_rank_is_repeatable(self, matcher, job):
        pool = [make_worker(str(i), experience=i % 3, ratings=[i % 5 + 1]) for i in range(6)]

        first = [(r.worker.id, r.match_score) for r in matcher.rank(job, pool)]
        second = [(r.worker.id, r.match_score) for r in matcher.rank(job, pool)]

        assert first == second


class TestScoreBreakdown:
    """Tests for ScoreBreakdown."""

    def test_total_sums_components(self):
        breakdown = ScoreBreakdown(
            skill_points=20, location_points=20, experience_points=5, reputation_points=9
        )

        assert breakdown.total == 54

    def test_default_breakdown_is_zero(self):
        assert ScoreBreakdown().total == 0


class TestPayloads:
    """Tests for payload and rationale helpers."""

    def test_match_payload_annotates_workers(self, matcher, job):
        worker = make_worker(
            "a",
            skills=["react"],
            location="New York",
            experience=1,
            ratings=[5],
            profile_pic_url="https://cdn.example.com/a.png",
        )

        payload = build_match_payload(matcher.rank(job, [worker]))

        assert list(payload.keys()) == ["matches"]
        record = payload["matches"][0]
        assert record["id"] == "a"
        assert record["user_id"] == "user-a"
        assert record["skills"] == ["react"]
        assert record["profiles"] == {"full_name": "Worker a"}
        assert record["reviews"] == [{"rating": 5}]
        assert record["profile_pic_url"] == "https://cdn.example.com/a.png"
        assert record["created_at"] == "2025-01-01T00:00:00+00:00"
        assert record["matchScore"] == 10 + 20 + 5 + 10

    def test_match_payload_empty(self):
        assert build_match_payload([]) == {"matches": []}

    def test_error_payload(self):
        assert build_error_payload("Job ID is required") == {"error": "Job ID is required"}

    def test_rationale_dict(self, matcher, job):
        result = matcher.score(job, make_worker("a", skills=["node"], experience=2))

        rationale = build_rationale_dict(result)

        assert rationale == {
            "worker_id": "a",
            "match_score": 20,
            "skill_points": 10,
            "location_points": 0,
            "experience_points": 10,
            "reputation_points": 0,
            "matched_skills": ["Node.js"],
        }

    def test_match_result_is_frozen(self, matcher, job):
        result = matcher.score(job, make_worker("a"))

        with pytest.raises(AttributeError):
            result.match_score = 100


class TestSummary:
    """Tests for average_rating and format_match_summary."""

    def test_average_rating(self):
        assert average_rating([4, 5, 5]) == 4.7
        assert average_rating([]) == 0.0

    def test_summary_lists_ranked_workers(self, matcher, job):
        pool = [
            make_worker("a", skills=["react"], experience=1),
            make_worker("b", experience=4, ratings=[4, 5]),
        ]

        summary = format_match_summary(matcher.rank(job, pool))

        lines = summary.splitlines()
        assert lines[0].startswith("1. Worker b (score 29)")
        assert "rating 4.5" in lines[0]
        assert lines[1].startswith("2. Worker a (score 15)")
        assert "matched skills: React" in lines[1]

    def test_summary_without_matches(self):
        assert format_match_summary([]) == "No matching workers found"

    def test_summary_falls_back_to_worker_id(self, job):
        result = MatchResult(
            worker=make_worker("anon", full_name=""),
            match_score=0,
            breakdown=ScoreBreakdown(),
        )

        assert format_match_summary([result]).startswith("1. anon (score 0)")


class TestWorkerDirectory:
    """Tests for format_worker_directory."""

    def test_lists_every_worker(self):
        workers = [
            make_worker(
                "a", skills=["react", "express"], location="New York", experience=3, ratings=[5, 4]
            ),
            make_worker("b", ratings=[3]),
        ]

        lines = format_worker_directory(workers).splitlines()

        assert lines == [
            "Worker a [a] rating 4.5 (2 reviews) | New York | 3 years experience | "
            "a@example.com | skills: react, express",
            "Worker b [b] rating 3.0 (1 review) | Nowhere | 0 years experience | "
            "b@example.com | skills: -",
        ]

    def test_unrated_worker(self):
        line = format_worker_directory([make_worker("c", location="")])

        assert "rating 0.0 (0 reviews) | - |" in line

    def test_empty_directory(self):
        assert format_worker_directory([]) == "No workers registered yet."
