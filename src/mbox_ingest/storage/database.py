"""Database connection and session management."""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, func
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.settings import get_settings
from .models import Base, StoredField, StoredMessage


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class Database:
    """Database connection manager."""

    def __init__(self, database_url: str | None = None):
        """Initialize database connection.

        Args:
            database_url: Optional database URL. If not provided, uses settings.
        """
        self._url = database_url or get_settings().database_url

        engine_args = {"echo": False}
        if _is_memory_url(self._url):
            # One shared connection, otherwise every session sees an empty database
            engine_args.update(
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine_args["pool_pre_ping"] = True
            # Ensure data directory exists for SQLite
            if self._url.startswith("sqlite:///"):
                db_path = self._url.replace("sqlite:///", "")
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_engine(self._url, **engine_args)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
        )

    @property
    def url(self) -> str:
        return self._url

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self._engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Get a database session context manager.

        Usage:
            with db.session() as session:
                session.add(message)
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """Get a new database session.

        Note: Caller is responsible for closing the session.
        Prefer using the session() context manager instead.
        """
        return self._session_factory()

    def stats(self) -> dict[str, int]:
        """Count stored messages, fields and distinct source files."""
        with self.session() as session:
            return {
                "messages": session.query(StoredMessage).count(),
                "fields": session.query(StoredField).count(),
                "files": session.query(
                    func.count(func.distinct(StoredMessage.source_path))
                ).scalar()
                or 0,
            }

    def dispose(self) -> None:
        self._engine.dispose()


def init_db(database_url: str | None = None) -> Database:
    """Create a database instance with its tables in place.

    Args:
        database_url: Optional database URL override.

    Returns:
        Database instance.
    """
    db = Database(database_url)
    db.create_tables()
    return db
