"""Marketplace write operations around the ranking step.

Each operation runs in its own transaction. None of them is linked to a
match request: an employer ranks workers first, then separately offers the
job to one of them.
"""

from datetime import datetime
from typing import List, Optional

from workmatch.domain.models import (
    Application,
    ApplicationStatus,
    JobPosting,
    JobStatus,
    Profile,
    Review,
    UserType,
    Worker,
)
from workmatch.logging import get_logger
from workmatch.persistence.database import get_session
from workmatch.persistence.exceptions import DataIntegrityError
from workmatch.persistence.repositories import (
    ApplicationRepository,
    JobRepository,
    ProfileRepository,
    ReviewRepository,
    WorkerRepository,
)

from .exceptions import (
    AlreadyAssignedError,
    ApplicationNotFoundError,
    JobNotFoundError,
    OfferNotPendingError,
    WorkerNotFoundError,
)
from .matching import SessionFactory
from .models import MarketplaceCounts

logger = get_logger(__name__, component="marketplace")


class MarketplaceService:
    """Creates marketplace records and moves offers through their states."""

    def __init__(self, session_factory: SessionFactory = get_session):
        self.session_factory = session_factory

    def register_profile(
        self,
        full_name: str,
        user_type: str,
        profile_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Profile:
        """Create a profile for a signed-up user."""
        fields = {"full_name": full_name, "user_type": UserType(user_type)}
        if profile_id:
            fields["id"] = profile_id
        if created_at is not None:
            fields["created_at"] = created_at
        profile = Profile(**fields)

        with self.session_factory() as session:
            created = ProfileRepository(session).create(profile)

        logger.info(
            "Profile registered",
            extra={"event": "marketplace.profile.registered", "profile_id": created.id},
        )
        return created

    def post_job(self, job: JobPosting) -> JobPosting:
        """Persist a new job posting in pending state."""
        with self.session_factory() as session:
            created = JobRepository(session).create(job)

        logger.info(
            "Job posted",
            extra={
                "event": "marketplace.job.posted",
                "job_id": created.id,
                "skill_count": len(created.skills_required),
            },
        )
        return created

    def register_worker(self, worker: Worker) -> Worker:
        """Persist a worker profile for an existing user."""
        with self.session_factory() as session:
            created = WorkerRepository(session).create(worker)

        logger.info(
            "Worker registered",
            extra={"event": "marketplace.worker.registered", "worker_id": created.id},
        )
        return created

    def leave_review(self, review: Review) -> Review:
        """Record an employer's rating of a worker."""
        with self.session_factory() as session:
            created = ReviewRepository(session).create(review)

        logger.info(
            "Review recorded",
            extra={
                "event": "marketplace.review.recorded",
                "worker_id": created.worker_id,
                "rating": created.rating,
            },
        )
        return created

    def assign_worker(self, job_id: str, worker_id: str) -> Application:
        """
        Offer a job to a worker.

        Records a pending application and marks the job as assigned, in one
        transaction.

        Raises:
            JobNotFoundError: If the job does not exist
            WorkerNotFoundError: If the worker does not exist
            AlreadyAssignedError: If this worker was already offered this job
        """
        with self.session_factory() as session:
            job_repo = JobRepository(session)
            app_repo = ApplicationRepository(session)

            if job_repo.get_by_id(job_id) is None:
                raise JobNotFoundError(job_id)
            if WorkerRepository(session).get_by_id(worker_id) is None:
                raise WorkerNotFoundError(worker_id)
            if any(app.worker_id == worker_id for app in app_repo.list_for_job(job_id)):
                raise AlreadyAssignedError(job_id, worker_id)

            try:
                application = app_repo.create(Application(job_id=job_id, worker_id=worker_id))
            except DataIntegrityError as e:
                # Lost a race with a concurrent offer of the same pair
                raise AlreadyAssignedError(job_id, worker_id) from e

            job_repo.update_status(job_id, JobStatus.ASSIGNED.value)

        logger.info(
            "Worker assigned to job",
            extra={
                "event": "marketplace.worker.assigned",
                "job_id": job_id,
                "worker_id": worker_id,
                "application_id": application.id,
            },
        )
        return application

    def respond_to_offer(self, application_id: str, accept: bool) -> Application:
        """
        Accept or decline a pending offer.

        Accepting marks the job accepted and records the worker on it;
        declining marks the job declined.

        Raises:
            ApplicationNotFoundError: If the application does not exist
            OfferNotPendingError: If the offer was already answered
        """
        with self.session_factory() as session:
            app_repo = ApplicationRepository(session)
            application = app_repo.get_by_id(application_id)
            if application is None:
                raise ApplicationNotFoundError(application_id)
            if application.status != ApplicationStatus.PENDING.value:
                raise OfferNotPendingError(application_id, application.status)

            if accept:
                updated = app_repo.update_status(application_id, ApplicationStatus.ACCEPTED.value)
                JobRepository(session).update_status(
                    application.job_id,
                    JobStatus.ACCEPTED.value,
                    accepted_worker_id=application.worker_id,
                )
            else:
                updated = app_repo.update_status(application_id, ApplicationStatus.DECLINED.value)
                JobRepository(session).update_status(application.job_id, JobStatus.DECLINED.value)

        logger.info(
            f"Offer {updated.status}",
            extra={
                "event": f"marketplace.offer.{updated.status}",
                "application_id": application_id,
                "job_id": updated.job_id,
                "worker_id": updated.worker_id,
            },
        )
        return updated

    def list_offers(self, worker_id: str) -> List[Application]:
        """List the offers made to a worker, newest first."""
        with self.session_factory() as session:
            return ApplicationRepository(session).list_for_worker(worker_id)

    def list_jobs(self, employer_id: str) -> List[JobPosting]:
        """List an employer's postings, newest first."""
        with self.session_factory() as session:
            return JobRepository(session).list_by_employer(employer_id)

    def list_workers(self) -> List[Worker]:
        """List every worker with name and ratings, in registration order."""
        with self.session_factory() as session:
            return WorkerRepository(session).list_pool()

    def get_counts(self) -> MarketplaceCounts:
        """Count registered workers and posted jobs."""
        with self.session_factory() as session:
            return MarketplaceCounts(
                workers=WorkerRepository(session).count(),
                jobs=JobRepository(session).count(),
            )
