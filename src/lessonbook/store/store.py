"""Store - bundles the repositories over one database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lessonbook.store.courses import CourseRepository
from lessonbook.store.database import Database
from lessonbook.store.lessons import LessonRepository
from lessonbook.store.participants import ParticipantRepository
from lessonbook.store.registrations import RegistrationRepository

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from sqlalchemy.orm import Session


class Store:
    """Main entry point to persistence.

    Exposes one repository per aggregate plus ``transaction()`` for callers
    that need several repository calls to commit or roll back together.
    """

    def __init__(self, db_path: str = "lessonbook.db") -> None:
        """Initialize the store with a SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self._db = Database(db_path)
        self._db.create_tables()
        self.lessons = LessonRepository(self._db)
        self.participants = ParticipantRepository(self._db)
        self.courses = CourseRepository(self._db)
        self.registrations = RegistrationRepository(self._db)

    def transaction(self) -> AbstractContextManager[Session]:
        """Open a unit of work; pass the yielded session to repository calls."""
        return self._db.session_scope()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()
