"""Data access layer (repositories) for persistence operations.

This module provides repository classes for the marketplace tables.
Repositories encapsulate database operations and return domain models
rather than ORM models.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from workmatch.domain.models import Application, JobPosting, Profile, Review, Worker

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import ApplicationModel, JobModel, ProfileModel, ReviewModel, WorkerModel

logger = logging.getLogger(__name__)


class _Repository:
    """Shared session handling and insert logic."""

    entity = "record"

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def _insert(self, model):
        """Add a model and flush so constraint violations surface here."""
        try:
            self.session.add(model)
            self.session.flush()
            return model
        except IntegrityError as e:
            logger.error(f"Integrity error creating {self.entity} {model.id}: {e}")
            raise DataIntegrityError(
                f"Failed to create {self.entity} due to constraint violation: {e.orig}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.entity} {model.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create {self.entity}: {e}") from e

    def _fetch_one(self, stmt):
        try:
            return self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.entity}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve {self.entity}: {e}") from e

    def _fetch_all(self, stmt) -> list:
        try:
            return list(self.session.execute(stmt).scalars().unique().all())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.entity} list: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve {self.entity} list: {e}") from e

    def _count(self, model_class) -> int:
        try:
            return self.session.scalar(select(func.count()).select_from(model_class)) or 0
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.entity} rows: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count {self.entity} rows: {e}") from e


class ProfileRepository(_Repository):
    """Repository for user profiles."""

    entity = "profile"

    def create(self, profile: Profile) -> Profile:
        return self._insert(ProfileModel.from_domain(profile)).to_domain()

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        model = self._fetch_one(select(ProfileModel).where(ProfileModel.id == profile_id))
        return model.to_domain() if model is not None else None


class JobRepository(_Repository):
    """Repository for job postings."""

    entity = "job"

    def create(self, job: JobPosting) -> JobPosting:
        """Insert a new job posting.

        Raises:
            DataIntegrityError: If the id exists or the employer is unknown
            PersistenceError: If database error occurs
        """
        return self._insert(JobModel.from_domain(job)).to_domain()

    def get_by_id(self, job_id: str) -> Optional[JobPosting]:
        """Retrieve a job by id.

        Returns:
            JobPosting if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        model = self._fetch_one(select(JobModel).where(JobModel.id == job_id))
        return model.to_domain() if model is not None else None

    def list_by_employer(self, employer_id: str) -> List[JobPosting]:
        """List an employer's postings, newest first."""
        stmt = (
            select(JobModel)
            .where(JobModel.employer_id == employer_id)
            .order_by(JobModel.created_at.desc())
        )
        return [model.to_domain() for model in self._fetch_all(stmt)]

    def count(self) -> int:
        """Number of posted jobs, whatever their status."""
        return self._count(JobModel)

    def update_status(
        self, job_id: str, status: str, accepted_worker_id: Optional[str] = None
    ) -> JobPosting:
        """Set a job's status, and its accepted worker when given.

        Raises:
            RecordNotFoundError: If job_id doesn't exist
            DataIntegrityError: If accepted_worker_id is not a known worker
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(JobModel, job_id)
            if model is None:
                raise RecordNotFoundError(f"Job with id {job_id} not found")

            model.status = status
            if accepted_worker_id is not None:
                model.accepted_worker_id = accepted_worker_id
            self.session.flush()
            return model.to_domain()

        except RecordNotFoundError:
            raise
        except IntegrityError as e:
            raise DataIntegrityError(f"Failed to update job status: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating status for job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update job status: {e}") from e


class WorkerRepository(_Repository):
    """Repository for workers, read joined with profile name and ratings."""

    entity = "worker"

    def create(self, worker: Worker) -> Worker:
        """Insert a worker. full_name and ratings are not stored on the row."""
        self._insert(WorkerModel.from_domain(worker))
        created = self.get_by_id(worker.id)
        return created if created is not None else worker

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        model = self._fetch_one(select(WorkerModel).where(WorkerModel.id == worker_id))
        if model is None:
            return None
        self.session.refresh(model)
        return model.to_domain()

    def get_by_user_id(self, user_id: str) -> Optional[Worker]:
        model = self._fetch_one(select(WorkerModel).where(WorkerModel.user_id == user_id))
        if model is None:
            return None
        self.session.refresh(model)
        return model.to_domain()

    def list_pool(self) -> List[Worker]:
        """Read every worker with profile name and review ratings.

        Returns:
            Workers in registration order (created_at, then id)

        Raises:
            PersistenceError: If database error occurs
        """
        stmt = select(WorkerModel).order_by(WorkerModel.created_at, WorkerModel.id)
        models = self._fetch_all(stmt)
        return [model.to_domain() for model in models]

    def count(self) -> int:
        return self._count(WorkerModel)


class ReviewRepository(_Repository):
    """Repository for worker reviews."""

    entity = "review"

    def create(self, review: Review) -> Review:
        model = self._insert(ReviewModel.from_domain(review))
        # The worker's cached reviews collection is now stale
        worker = self.session.get(WorkerModel, review.worker_id)
        if worker is not None:
            self.session.expire(worker, ["reviews"])
        return model.to_domain()

    def list_for_worker(self, worker_id: str) -> List[Review]:
        stmt = (
            select(ReviewModel)
            .where(ReviewModel.worker_id == worker_id)
            .order_by(ReviewModel.created_at, ReviewModel.id)
        )
        return [model.to_domain() for model in self._fetch_all(stmt)]


class ApplicationRepository(_Repository):
    """Repository for job offers made to workers."""

    entity = "application"

    def create(self, application: Application) -> Application:
        """Record an offer.

        Raises:
            DataIntegrityError: If the job was already offered to this worker,
                or the job or worker does not exist
            PersistenceError: If database error occurs
        """
        return self._insert(ApplicationModel.from_domain(application)).to_domain()

    def get_by_id(self, application_id: str) -> Optional[Application]:
        model = self._fetch_one(
            select(ApplicationModel).where(ApplicationModel.id == application_id)
        )
        return model.to_domain() if model is not None else None

    def list_for_worker(self, worker_id: str) -> List[Application]:
        """List a worker's offers, newest first."""
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.worker_id == worker_id)
            .order_by(ApplicationModel.created_at.desc())
        )
        return [model.to_domain() for model in self._fetch_all(stmt)]

    def list_for_job(self, job_id: str) -> List[Application]:
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.job_id == job_id)
            .order_by(ApplicationModel.created_at)
        )
        return [model.to_domain() for model in self._fetch_all(stmt)]

    def update_status(self, application_id: str, status: str) -> Application:
        """Set an offer's status.

        Raises:
            RecordNotFoundError: If application_id doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ApplicationModel, application_id)
            if model is None:
                raise RecordNotFoundError(f"Application with id {application_id} not found")

            model.status = status
            self.session.flush()
            return model.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Error updating status for application {application_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to update application status: {e}") from e
