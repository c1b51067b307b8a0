"""Engine and session lifecycle for the marketplace database.

One module-level engine is created by init_database() and shared by every
session handed out by get_session().
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from workmatch.logging import get_logger

from .exceptions import DatabaseConnectionError

_engine: Engine | None = None
_session_factory: sessionmaker | None = None

logger = get_logger(__name__, component="database")


def init_database(database_url: str, echo: bool = False) -> None:
    """Connect to the marketplace database and create any missing tables.

    Call once during startup. Calling again replaces the previous engine.

    Args:
        database_url: SQLAlchemy URL (e.g., "sqlite:///./data/workmatch.db")
        echo: Log every SQL statement (debugging only)

    Raises:
        DatabaseConnectionError: If the URL is unusable or the database unreachable

    Example:
        >>> init_database("sqlite:///./data/workmatch.db")
    """
    global _engine, _session_factory

    try:
        if not database_url or not isinstance(database_url, str):
            raise DatabaseConnectionError(
                "A database URL is required (e.g. sqlite:///./data/workmatch.db)"
            )

        logger.info(
            "Initializing database",
            extra={
                "event": "database.initializing",
                "database_url": _redact_url(database_url),
            },
        )

        if _engine is not None:
            _engine.dispose()

        is_sqlite = database_url.startswith("sqlite")

        # SQLite will not create missing directories for a file database
        if database_url.startswith("sqlite:///") and not database_url.endswith(":memory:"):
            db_file = Path(database_url.replace("sqlite:///", "", 1))
            if not db_file.parent.exists():
                logger.info(f"Creating database directory: {db_file.parent}")
                db_file.parent.mkdir(parents=True, exist_ok=True)

        _engine = create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False, "timeout": 30} if is_sqlite else {},
        )

        if is_sqlite:
            _configure_sqlite(_engine)

        _validate_connection(_engine)

        _session_factory = sessionmaker(
            bind=_engine,
            autoflush=True,
            expire_on_commit=False,
        )

        from .schema import create_schema

        create_schema(_engine)

        logger.info(
            "Database initialized successfully",
            extra={
                "event": "database.initialised",
                "database_url": _redact_url(database_url),
            },
        )

    except DatabaseConnectionError:
        raise
    except Exception as e:
        error_msg = f"Failed to initialize database: {e}"
        logger.error(error_msg, exc_info=True)
        raise DatabaseConnectionError(error_msg) from e


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys and WAL journaling on every SQLite connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def _validate_connection(engine: Engine) -> None:
    """Run a trivial query so connection problems surface at startup.

    Raises:
        DatabaseConnectionError: If the query fails
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.debug("Database connection check passed")
    except Exception as e:
        raise DatabaseConnectionError(f"Database did not answer a test query: {e}") from e


def _redact_url(url: str) -> str:
    """Redact the password from a database URL for logging.

    Example:
        >>> _redact_url("postgresql://app:secret@db:5432/market")
        'postgresql://app:***@db:5432/market'
    """
    if url.startswith("sqlite"):
        return url

    if "@" in url and "://" in url:
        credentials, host = url.rsplit("@", 1)
        scheme, _, userinfo = credentials.partition("://")
        username = userinfo.split(":", 1)[0]
        return f"{scheme}://{username}:***@{host}"

    return url


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Open a session scoped to one unit of work.

    The transaction commits when the block exits normally and rolls back if
    it raises. The session is closed either way.

    Yields:
        Session bound to the shared engine

    Raises:
        DatabaseConnectionError: If init_database() has not run

    Example:
        >>> with get_session() as session:
        ...     pool = WorkerRepository(session).list_pool()
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "No database configured; call init_database() first"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
        logger.debug(
            "Database session committed",
            extra={"event": "database.session.committed"},
        )
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Database session rolled back due to exception: {e}",
            extra={
                "event": "database.session.rolled_back",
                "error_type": type(e).__name__,
            },
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """Return the shared engine.

    Raises:
        DatabaseConnectionError: If init_database() has not run
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "No database configured; call init_database() first"
        )

    return _engine


def close_database() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Disposing database engine", extra={"event": "database.closed"})
        _engine.dispose()
        _engine = None
        _session_factory = None
