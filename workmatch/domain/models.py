"""Core domain models for the job marketplace.

This module defines the data structures used throughout the application:
- Profile: a registered user (employer or worker) with a display name
- JobPosting: a posted work opportunity with required skills and location
- Worker: a candidate with skills, location, experience, and review ratings
- Review: an employer's rating of a worker for a job
- Application: an offer of a job to a worker and its response status
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from workmatch.utils import clean_labels, ensure_utc, new_id, utc_now


class UserType(str, Enum):
    """Kinds of marketplace users."""

    EMPLOYER = "employer"
    WORKER = "worker"


class JobStatus(str, Enum):
    """Lifecycle states of a job posting."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ApplicationStatus(str, Enum):
    """Response states of a job offer."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


def _strip_required(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Field cannot be empty or whitespace-only")
    return v.strip()


class Profile(BaseModel):
    """Registered marketplace user.

    Profiles are owned by the identity provider; only the display name and
    user type matter here.
    """

    id: str = Field(default_factory=new_id, description="Profile identifier")
    full_name: str = Field(..., description="Display name")
    user_type: UserType = Field(..., description="employer or worker")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from the display name."""
        return _strip_required(v)

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {"use_enum_values": True}


class JobPosting(BaseModel):
    """A posted work opportunity.

    skills_required and location are the only fields the matcher reads.
    Both may be empty but are never absent.
    """

    id: str = Field(default_factory=new_id, description="Job identifier")
    employer_id: str = Field(..., description="Profile id of the posting employer")
    title: str = Field(..., description="Job title")
    description: str = Field(..., description="Full job description")
    skills_required: List[str] = Field(default_factory=list, description="Required skill labels")
    location: str = Field("", description="Location label")
    budget: float = Field(..., ge=0, description="Offered budget")
    deadline_days: int = Field(..., ge=1, description="Days until the work is due")
    status: JobStatus = Field(
        JobStatus.PENDING, validate_default=True, description="Posting status"
    )
    accepted_worker_id: Optional[str] = Field(None, description="Worker who accepted the job")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")

    @field_validator("employer_id", "title", "description")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from required string fields."""
        return _strip_required(v)

    @field_validator("location")
    @classmethod
    def strip_location(cls, v: str) -> str:
        return v.strip()

    @field_validator("skills_required")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        """Strip skill labels and drop empty ones."""
        return clean_labels(v)

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {"use_enum_values": True, "json_schema_extra": {"example": {
        "id": "4f1c2a0e-8d7b-4a51-9f39-1c1e3d2b7a10",
        "employer_id": "0b6f0a44-2c0c-4c55-8d0b-55b1c4f1e2aa",
        "title": "Build a booking page",
        "description": "Small React front end talking to an existing Node.js API.",
        "skills_required": ["React", "Node.js"],
        "location": "New York",
        "budget": 1500.0,
        "deadline_days": 14,
        "status": "pending",
    }}}


class Worker(BaseModel):
    """A candidate worker joined with its profile name and review ratings.

    full_name comes from the linked profile and ratings from the worker's
    reviews; both are filled in by the repository when the pool is read.
    """

    id: str = Field(default_factory=new_id, description="Worker identifier")
    user_id: str = Field(..., description="Profile id of the worker")
    full_name: str = Field("", description="Display name from the linked profile")
    skills: List[str] = Field(default_factory=list, description="Possessed skill labels")
    location: str = Field("", description="Location label")
    experience: int = Field(0, ge=0, description="Years of experience")
    contact: str = Field(..., description="Contact details")
    profile_pic_url: Optional[str] = Field(None, description="Avatar URL")
    ratings: List[int] = Field(default_factory=list, description="Received review ratings")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")

    @field_validator("user_id", "contact")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("location", "full_name")
    @classmethod
    def strip_optional_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        """Strip skill labels and drop empty ones."""
        return clean_labels(v)

    @field_validator("profile_pic_url")
    @classmethod
    def blank_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class Review(BaseModel):
    """An employer's rating of a worker for a completed job."""

    id: str = Field(default_factory=new_id, description="Review identifier")
    job_id: str = Field(..., description="Reviewed job")
    worker_id: str = Field(..., description="Reviewed worker")
    employer_id: str = Field(..., description="Reviewing employer")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Free-text comment")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class Application(BaseModel):
    """An offer of a job to a worker.

    Created as pending when an employer assigns a ranked worker; the worker
    then accepts or declines it.
    """

    id: str = Field(default_factory=new_id, description="Application identifier")
    job_id: str = Field(..., description="Offered job")
    worker_id: str = Field(..., description="Offered worker")
    status: ApplicationStatus = Field(
        ApplicationStatus.PENDING, validate_default=True, description="Offer status"
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {"use_enum_values": True}
