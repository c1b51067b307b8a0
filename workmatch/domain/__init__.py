"""Domain models for the WorkMatch marketplace."""

from .models import (
    Application,
    ApplicationStatus,
    JobPosting,
    JobStatus,
    Profile,
    Review,
    UserType,
    Worker,
)

__all__ = [
    "Profile",
    "JobPosting",
    "Worker",
    "Review",
    "Application",
    "UserType",
    "JobStatus",
    "ApplicationStatus",
]
