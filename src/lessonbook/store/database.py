"""Database connection manager for the lesson store."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lessonbook.store.models import Base

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine

MEMORY_PATH = ":memory:"


def _apply_sqlite_pragmas(dbapi_connection: object, _connection_record: object) -> None:
    """Enable WAL journaling and foreign key enforcement on every new connection."""
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(db_path: str) -> Engine:
    if db_path == MEMORY_PATH:
        # One shared connection so every session sees the same in-memory database
        engine = create_engine(
            "sqlite:///:memory:",
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{db_path}",
            future=True,
            connect_args={"check_same_thread": False},
        )
    event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine


class Database:
    """Database connection manager.

    Owns the SQLAlchemy engine and hands out short-lived sessions.
    """

    def __init__(self, db_path: str = "lessonbook.db") -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory DB.
        """
        self.db_path = db_path
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = _build_engine(self.db_path)
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.session_factory()

    @contextmanager
    def session_scope(self, session: Session | None = None) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations.

        Commits on success, rolls back on any exception and always closes.
        When an outer session is passed in, it is yielded unchanged and the
        outer scope stays responsible for committing it.

        Args:
            session: Session of an enclosing unit of work, if any.

        Yields:
            An open SQLAlchemy session.
        """
        if session is not None:
            yield session
            return

        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of the engine and forget the session factory."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
