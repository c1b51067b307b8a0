"""Load marketplace records from a YAML file.

Used by the ``seed`` command to populate a local database for demos and
manual testing. Records are created in dependency order: profiles, workers,
jobs, then reviews and applications.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, FrozenSet, List

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from workmatch.domain.models import (
    Application,
    ApplicationStatus,
    JobPosting,
    Profile,
    Review,
    Worker,
)
from workmatch.logging import get_logger

from .marketplace import MarketplaceService

logger = get_logger(__name__, component="seed")


class SeedError(Exception):
    """The seed file could not be read or validated."""

    pass


class _SeedRecord(BaseModel):
    """Rejects unknown keys and the keys listed in store_derived.

    store_derived names fields the store computes itself, so a value for
    them in a seed file could never take effect.
    """

    store_derived: ClassVar[FrozenSet[str]] = frozenset()

    model_config = {"extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def reject_store_derived(cls, data: Any) -> Any:
        if isinstance(data, dict):
            present = sorted(cls.store_derived.intersection(data))
            if present:
                raise ValueError(
                    f"{', '.join(present)} cannot be seeded; the store derives "
                    f"{'them' if len(present) > 1 else 'it'}"
                )
        return data


class ProfileSeed(_SeedRecord, Profile):
    pass


class JobSeed(_SeedRecord, JobPosting):
    pass


class WorkerSeed(_SeedRecord, Worker):
    """Worker row; full_name comes from the profile and ratings from reviews."""

    store_derived: ClassVar[FrozenSet[str]] = frozenset({"full_name", "ratings"})


class ReviewSeed(_SeedRecord, Review):
    pass


class ApplicationSeed(_SeedRecord, Application):
    """Offer of job_id to worker_id, optionally already answered via status."""

    store_derived: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})


class SeedData(BaseModel):
    """Records declared in a seed file."""

    profiles: List[ProfileSeed] = Field(default_factory=list)
    workers: List[WorkerSeed] = Field(default_factory=list)
    jobs: List[JobSeed] = Field(default_factory=list)
    reviews: List[ReviewSeed] = Field(default_factory=list)
    applications: List[ApplicationSeed] = Field(default_factory=list)


@dataclass
class SeedSummary:
    """Counts of records created by seed_database()."""

    profiles: int = 0
    workers: int = 0
    jobs: int = 0
    reviews: int = 0
    applications: int = 0


def load_seed_file(path: Path) -> SeedData:
    """Parse and validate a seed file.

    Raises:
        SeedError: If the file is missing, malformed or fails validation
    """
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise SeedError(f"Cannot read seed file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SeedError(f"Cannot parse seed file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise SeedError(f"Seed file {path} must contain a mapping at the top level")

    try:
        return SeedData.model_validate(raw)
    except ValidationError as e:
        raise SeedError(f"Invalid seed file {path}:\n{e}") from e


def seed_database(data: SeedData, marketplace: MarketplaceService) -> SeedSummary:
    """Create every record in data through the marketplace service."""
    summary = SeedSummary()

    for profile in data.profiles:
        marketplace.register_profile(
            profile.full_name,
            profile.user_type,
            profile_id=profile.id,
            created_at=profile.created_at,
        )
        summary.profiles += 1

    for worker in data.workers:
        marketplace.register_worker(worker)
        summary.workers += 1

    for job in data.jobs:
        marketplace.post_job(job)
        summary.jobs += 1

    for review in data.reviews:
        marketplace.leave_review(review)
        summary.reviews += 1

    for application in data.applications:
        offer = marketplace.assign_worker(application.job_id, application.worker_id)
        if application.status != ApplicationStatus.PENDING.value:
            marketplace.respond_to_offer(
                offer.id, accept=application.status == ApplicationStatus.ACCEPTED.value
            )
        summary.applications += 1

    logger.info(
        "Seed data loaded",
        extra={
            "event": "seed.completed",
            "profiles": summary.profiles,
            "workers": summary.workers,
            "jobs": summary.jobs,
            "reviews": summary.reviews,
            "applications": summary.applications,
        },
    )
    return summary
