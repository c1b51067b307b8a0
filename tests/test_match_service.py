"""Unit tests for the match request service."""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest

from workmatch.domain.models import JobPosting, Profile, Review, Worker
from workmatch.logging.context import clear_log_context, get_log_context
from workmatch.matching.engine import WorkerMatcher
from workmatch.persistence import (
    JobRepository,
    PersistenceError,
    ProfileRepository,
    ReviewRepository,
    WorkerRepository,
    close_database,
    get_session,
    init_database,
)
from workmatch.service import JobNotFoundError, MatchResponse, MatchService, MissingJobIdError

BASE_TIME = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def marketplace_db(tmp_path):
    """Database holding one job and the reference worker pool."""
    init_database(f"sqlite:///{tmp_path / 'match.db'}")

    with get_session() as session:
        profiles = ProfileRepository(session)
        profiles.create(Profile(id="emp-1", full_name="Acme Studio", user_type="employer"))
        for name in ["a", "b", "c", "d"]:
            profiles.create(
                Profile(id=f"user-{name}", full_name=f"Worker {name.upper()}", user_type="worker")
            )

        JobRepository(session).create(
            JobPosting(
                id="job-1",
                employer_id="emp-1",
                title="Build a booking page",
                description="React front end",
                skills_required=["React", "Node.js"],
                location="New York",
                budget=1500,
                deadline_days=14,
            )
        )

        workers = WorkerRepository(session)
        specs = [
            ("a", ["react", "express"], "New York, USA", 3),
            ("b", ["Vue"], "Lisbon", 2),
            ("c", ["Figma"], "Tel Aviv", 0),
            ("d", ["React Native", "Node.js"], "Brooklyn", 5),
        ]
        for minutes, (name, skills, location, experience) in enumerate(specs):
            workers.create(
                Worker(
                    id=f"w-{name}",
                    user_id=f"user-{name}",
                    skills=skills,
                    location=location,
                    experience=experience,
                    contact=f"{name}@example.com",
                    created_at=BASE_TIME + timedelta(minutes=minutes),
                )
            )

        reviews = ReviewRepository(session)
        for worker_id, rating in [("w-a", 5), ("w-a", 5), ("w-b", 4), ("w-b", 5)]:
            reviews.create(
                Review(job_id="job-1", worker_id=worker_id, employer_id="emp-1", rating=rating)
            )

    yield
    close_database()


class TestFindMatches:
    """Tests for MatchService.find_matches()."""

    def test_ranks_the_pool(self, marketplace_db):
        response = MatchService().find_matches("job-1")

        assert isinstance(response, MatchResponse)
        assert response.job.id == "job-1"
        assert response.pool_size == 4
        assert [(r.worker.id, r.match_score) for r in response.matches] == [
            ("w-a", 55),
            ("w-d", 45),
            ("w-b", 19),
        ]
        assert response.top_score == 55
        assert len(response.request_id) == 32

    def test_job_id_is_stripped(self, marketplace_db):
        assert MatchService().find_matches("  job-1 ").job.id == "job-1"

    @pytest.mark.parametrize("job_id", [None, "", "   ", 0, False, 42])
    def test_missing_job_id(self, job_id):
        session_factory = Mock()

        with pytest.raises(MissingJobIdError, match="Job ID is required"):
            MatchService(session_factory=session_factory).find_matches(job_id)

        session_factory.assert_not_called()

    def test_unknown_job(self, marketplace_db):
        with pytest.raises(JobNotFoundError, match="Job missing not found"):
            MatchService().find_matches("missing")

    def test_empty_pool(self, tmp_path):
        init_database(f"sqlite:///{tmp_path / 'empty.db'}")
        try:
            with get_session() as session:
                ProfileRepository(session).create(
                    Profile(id="emp-1", full_name="Acme", user_type="employer")
                )
                JobRepository(session).create(
                    JobPosting(
                        id="job-1",
                        employer_id="emp-1",
                        title="t",
                        description="d",
                        budget=1,
                        deadline_days=1,
                    )
                )

            response = MatchService().find_matches("job-1")
        finally:
            close_database()

        assert response.matches == []
        assert response.top_score is None

    def test_pool_failure_aborts_before_ranking(self, marketplace_db):
        matcher = Mock(spec=WorkerMatcher)

        with patch(
            "workmatch.service.matching.WorkerRepository.list_pool",
            side_effect=PersistenceError("Failed to retrieve worker list: disk I/O error"),
        ):
            with pytest.raises(PersistenceError):
                MatchService(matcher=matcher).find_matches("job-1")

        matcher.rank.assert_not_called()

    def test_job_failure_skips_pool_read(self, marketplace_db):
        with patch(
            "workmatch.service.matching.JobRepository.get_by_id",
            side_effect=PersistenceError("Failed to retrieve job: connection reset"),
        ), patch("workmatch.service.matching.WorkerRepository.list_pool") as list_pool:
            with pytest.raises(PersistenceError):
                MatchService().find_matches("job-1")

        list_pool.assert_not_called()

    def test_uses_injected_session_factory(self):
        session = Mock()

        @contextmanager
        def session_factory():
            yield session

        job = JobPosting(
            id="job-1", employer_id="e", title="t", description="d", budget=1, deadline_days=1
        )
        with patch("workmatch.service.matching.JobRepository") as job_repo, patch(
            "workmatch.service.matching.WorkerRepository"
        ) as worker_repo:
            job_repo.return_value.get_by_id.return_value = job
            worker_repo.return_value.list_pool.return_value = []

            response = MatchService(session_factory=session_factory).find_matches("job-1")

        job_repo.assert_called_once_with(session)
        worker_repo.assert_called_once_with(session)
        assert response.matches == []

    def test_logs_carry_request_context(self, marketplace_db, caplog):
        with caplog.at_level(logging.INFO, logger="workmatch.service.matching"):
            response = MatchService().find_matches("job-1")

        completed = [
            r for r in caplog.records if getattr(r, "event", None) == "match.request.completed"
        ]
        assert len(completed) == 1
        record = completed[0]
        assert record.component == "match"
        assert record.returned == 3
        assert record.pool_size == 4
        assert record.top_score == 55
        assert get_log_context() == {}
        assert response.request_id

    def test_context_cleared_after_failure(self, marketplace_db):
        with pytest.raises(JobNotFoundError):
            MatchService().find_matches("missing")

        assert get_log_context() == {}


class TestHandleRequest:
    """Tests for MatchService.handle_request()."""

    def test_success_payload(self, marketplace_db):
        status, body = MatchService().handle_request({"jobId": "job-1"})

        assert status == 200
        assert [m["id"] for m in body["matches"]] == ["w-a", "w-d", "w-b"]
        assert [m["matchScore"] for m in body["matches"]] == [55, 45, 19]
        assert body["matches"][0]["profiles"] == {"full_name": "Worker A"}
        assert body["matches"][0]["reviews"] == [{"rating": 5}, {"rating": 5}]

    def test_snake_case_key_accepted(self, marketplace_db):
        status, _ = MatchService().handle_request({"job_id": "job-1"})

        assert status == 200

    @pytest.mark.parametrize(
        "payload", [{}, None, "job-1", {"jobId": ""}, {"jobId": 0}, {"jobId": False}]
    )
    def test_missing_job_id(self, payload):
        status, body = MatchService(session_factory=Mock()).handle_request(payload)

        assert status == 500
        assert body == {"error": "Job ID is required"}

    def test_unknown_job(self, marketplace_db):
        status, body = MatchService().handle_request({"jobId": "missing"})

        assert status == 500
        assert body == {"error": "Job missing not found"}

    def test_store_failure_message_passed_through(self, marketplace_db, caplog):
        with patch(
            "workmatch.service.matching.WorkerRepository.list_pool",
            side_effect=PersistenceError("Failed to retrieve worker list: timeout"),
        ):
            status, body = MatchService().handle_request({"jobId": "job-1"})

        assert status == 500
        assert body == {"error": "Failed to retrieve worker list: timeout"}
        failed = [r for r in caplog.records if getattr(r, "event", None) == "match.request.failed"]
        assert failed and failed[0].error_type == "PersistenceError"

    def test_blank_error_message_replaced(self):
        service = MatchService()
        with patch.object(service, "find_matches", side_effect=RuntimeError()):
            status, body = service.handle_request({"jobId": "job-1"})

        assert status == 500
        assert body == {"error": "An unknown error occurred"}
