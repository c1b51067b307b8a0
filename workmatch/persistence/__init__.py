"""Persistence layer for the marketplace's relational store.

Public API:
    # Database initialization and session management
    - init_database(database_url: str, echo: bool = False) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - ProfileRepository, JobRepository, WorkerRepository,
      ReviewRepository, ApplicationRepository

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - RecordNotFoundError: Required record not found
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from workmatch.persistence import init_database, get_session, WorkerRepository
    >>> init_database("sqlite:///./data/workmatch.db")
    >>> with get_session() as session:
    ...     pool = WorkerRepository(session).list_pool()
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import (
    ApplicationRepository,
    JobRepository,
    ProfileRepository,
    ReviewRepository,
    WorkerRepository,
)

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "ProfileRepository",
    "JobRepository",
    "WorkerRepository",
    "ReviewRepository",
    "ApplicationRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
