"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the marketplace tables and
provides conversion methods between ORM models and domain models.
Timestamps are stored as ISO 8601 strings and skill lists as JSON.
"""

import logging

from sqlalchemy import (
    JSON,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    inspect,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

from workmatch.domain.models import Application, JobPosting, Profile, Review, Worker
from workmatch.utils.timestamps import format_timestamp, parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


def _format_datetime(dt):
    return format_timestamp(dt, include_microseconds=True)


class ProfileModel(Base):
    """ORM model for profiles table."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    user_type = Column(String(20), nullable=False)
    created_at = Column(String(50), nullable=False)

    def to_domain(self) -> Profile:
        return Profile(
            id=self.id,
            full_name=self.full_name,
            user_type=self.user_type,
            created_at=parse_iso_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileModel":
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            user_type=profile.user_type,
            created_at=_format_datetime(profile.created_at),
        )


class JobModel(Base):
    """ORM model for jobs table."""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, nullable=False)
    employer_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    skills_required = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=False, default="")
    budget = Column(Float, nullable=False)
    deadline_days = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    accepted_worker_id = Column(String(36), ForeignKey("workers.id"), nullable=True)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_jobs_employer", "employer_id"),
        Index("idx_jobs_status", "status"),
    )

    def to_domain(self) -> JobPosting:
        """Convert ORM model to domain model."""
        return JobPosting(
            id=self.id,
            employer_id=self.employer_id,
            title=self.title,
            description=self.description,
            skills_required=list(self.skills_required or []),
            location=self.location or "",
            budget=self.budget,
            deadline_days=self.deadline_days,
            status=self.status,
            accepted_worker_id=self.accepted_worker_id,
            created_at=parse_iso_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, job: JobPosting) -> "JobModel":
        """Create ORM model from domain model."""
        return cls(
            id=job.id,
            employer_id=job.employer_id,
            title=job.title,
            description=job.description,
            skills_required=list(job.skills_required),
            location=job.location,
            budget=job.budget,
            deadline_days=job.deadline_days,
            status=job.status,
            accepted_worker_id=job.accepted_worker_id,
            created_at=_format_datetime(job.created_at),
        )


class ReviewModel(Base):
    """ORM model for reviews table."""

    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False)
    worker_id = Column(String(36), ForeignKey("workers.id"), nullable=False)
    employer_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_reviews_worker", "worker_id"),)

    def to_domain(self) -> Review:
        return Review(
            id=self.id,
            job_id=self.job_id,
            worker_id=self.worker_id,
            employer_id=self.employer_id,
            rating=self.rating,
            comment=self.comment,
            created_at=parse_iso_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, review: Review) -> "ReviewModel":
        return cls(
            id=review.id,
            job_id=review.job_id,
            worker_id=review.worker_id,
            employer_id=review.employer_id,
            rating=review.rating,
            comment=review.comment,
            created_at=_format_datetime(review.created_at),
        )


class WorkerModel(Base):
    """ORM model for workers table.

    The profile is joined eagerly and reviews are loaded in one extra query,
    so a pool read costs two round trips regardless of pool size.
    """

    __tablename__ = "workers"

    id = Column(String(36), primary_key=True, nullable=False)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, unique=True)
    skills = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=False, default="")
    experience = Column(Integer, nullable=False, default=0)
    contact = Column(String(255), nullable=False)
    profile_pic_url = Column(Text, nullable=True)
    created_at = Column(String(50), nullable=False)

    profile = relationship(ProfileModel, lazy="joined")
    reviews = relationship(
        ReviewModel,
        lazy="selectin",
        order_by=(ReviewModel.created_at, ReviewModel.id),
    )

    __table_args__ = (Index("idx_workers_created", "created_at"),)

    def to_domain(self) -> Worker:
        """Convert ORM model to domain model, including profile name and ratings."""
        return Worker(
            id=self.id,
            user_id=self.user_id,
            full_name=self.profile.full_name if self.profile is not None else "",
            skills=list(self.skills or []),
            location=self.location or "",
            experience=self.experience,
            contact=self.contact,
            profile_pic_url=self.profile_pic_url,
            ratings=[review.rating for review in self.reviews],
            created_at=parse_iso_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, worker: Worker) -> "WorkerModel":
        """Create ORM model from domain model (name and ratings live elsewhere)."""
        return cls(
            id=worker.id,
            user_id=worker.user_id,
            skills=list(worker.skills),
            location=worker.location,
            experience=worker.experience,
            contact=worker.contact,
            profile_pic_url=worker.profile_pic_url,
            created_at=_format_datetime(worker.created_at),
        )


class ApplicationModel(Base):
    """ORM model for applications table.

    A job can be offered to a given worker only once.
    """

    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False)
    worker_id = Column(String(36), ForeignKey("workers.id"), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("job_id", "worker_id", name="uq_applications_job_worker"),
        Index("idx_applications_worker", "worker_id"),
    )

    def to_domain(self) -> Application:
        return Application(
            id=self.id,
            job_id=self.job_id,
            worker_id=self.worker_id,
            status=self.status,
            created_at=parse_iso_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, application: Application) -> "ApplicationModel":
        return cls(
            id=application.id,
            job_id=application.job_id,
            worker_id=application.worker_id,
            status=application.status,
            created_at=_format_datetime(application.created_at),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
