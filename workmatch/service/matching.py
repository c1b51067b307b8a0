"""Request orchestration for ranking workers against a job."""

import time
from typing import Any, Callable, ContextManager, Dict, Optional, Tuple
from uuid import uuid4

from sqlalchemy.orm import Session

from workmatch.logging import get_logger
from workmatch.logging.context import log_context
from workmatch.matching.engine import WorkerMatcher
from workmatch.matching.utils import build_error_payload, build_match_payload, build_rationale_dict
from workmatch.persistence.database import get_session
from workmatch.persistence.repositories import JobRepository, WorkerRepository

from .exceptions import JobNotFoundError, MissingJobIdError
from .models import MatchResponse

logger = get_logger(__name__, component="match")

SessionFactory = Callable[[], ContextManager[Session]]


class MatchService:
    """
    Serves match requests: read the job, read the pool, rank.

    Both reads must succeed before ranking runs. Any failure aborts the
    request; there is no retry and no partial result. Ranking itself is a
    pure step with no writes.
    """

    def __init__(
        self,
        matcher: Optional[WorkerMatcher] = None,
        session_factory: SessionFactory = get_session,
    ):
        """
        Initialize the match service.

        Args:
            matcher: Ranking engine (defaults to a new WorkerMatcher)
            session_factory: Context manager yielding a database session
        """
        self.matcher = matcher or WorkerMatcher()
        self.session_factory = session_factory

    def find_matches(self, job_id: Optional[str]) -> MatchResponse:
        """
        Rank the full worker pool for one job.

        Args:
            job_id: Identifier of the job to match

        Returns:
            MatchResponse with at most three ranked workers

        Raises:
            MissingJobIdError: If job_id is not a non-blank string
            JobNotFoundError: If no job has this id
            PersistenceError: If either read fails
        """
        request_id = uuid4().hex
        started = time.time()

        with log_context(request_id=request_id, job_id=job_id):
            if not isinstance(job_id, str) or not job_id.strip():
                logger.warning(
                    "Match request rejected: no job id",
                    extra={"event": "match.request.rejected"},
                )
                raise MissingJobIdError()

            job_id = job_id.strip()
            logger.info("Match request started", extra={"event": "match.request.started"})

            with self.session_factory() as session:
                job = JobRepository(session).get_by_id(job_id)
                if job is None:
                    raise JobNotFoundError(job_id)

                pool = WorkerRepository(session).list_pool()

            matches = self.matcher.rank(job, pool)

            response = MatchResponse(
                request_id=request_id,
                job=job,
                matches=matches,
                pool_size=len(pool),
                duration_seconds=time.time() - started,
            )

            for position, result in enumerate(matches, 1):
                logger.debug(
                    f"Ranked worker #{position}",
                    extra={"event": "match.candidate.ranked", **build_rationale_dict(result)},
                )

            logger.info(
                f"Match request completed: {len(matches)} of {len(pool)} workers returned",
                extra={
                    "event": "match.request.completed",
                    "pool_size": len(pool),
                    "returned": len(matches),
                    "top_score": response.top_score,
                    "duration_ms": int(response.duration_seconds * 1000),
                },
            )
            return response

    def handle_request(self, payload: Any) -> Tuple[int, Dict]:
        """
        Serve a JSON-shaped match request.

        Args:
            payload: Decoded request body, expected to carry ``jobId``
                (``job_id`` is accepted too)

        Returns:
            (200, {"matches": [...]}) on success, or
            (500, {"error": message}) on any failure
        """
        job_id = None
        if isinstance(payload, dict):
            job_id = payload.get("jobId", payload.get("job_id"))

        try:
            response = self.find_matches(job_id)
        except Exception as e:
            message = str(e) or "An unknown error occurred"
            logger.error(
                f"Match request failed: {message}",
                extra={
                    "event": "match.request.failed",
                    "job_id": job_id,
                    "error_type": type(e).__name__,
                },
            )
            return 500, build_error_payload(message)

        return 200, build_match_payload(response.matches)
