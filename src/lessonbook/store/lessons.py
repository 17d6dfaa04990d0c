"""LessonRepository - persisted collection of lesson instances."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import case, delete, select, update

from lessonbook.store.exceptions import LessonNotFoundError
from lessonbook.store.models import Lesson

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from lessonbook.store.database import Database
    from lessonbook.store.filters import LessonFilter, LessonUpdate

logger = logging.getLogger(__name__)


class LessonRepository:
    """Lesson persistence operations.

    Every method opens its own transaction unless an enclosing ``session``
    is passed, in which case it joins that unit of work.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, lesson: Lesson, session: Session | None = None) -> Lesson:
        """Insert a lesson.

        Args:
            lesson: Lesson to persist.
            session: Enclosing session (optional).

        Returns:
            The persisted lesson.
        """
        with self._db.session_scope(session) as s:
            s.add(lesson)
            s.flush()
            s.refresh(lesson)
            return lesson

    def add_many(self, lessons: Iterable[Lesson], session: Session | None = None) -> list[Lesson]:
        """Insert several lessons in one transaction, preserving order."""
        created = list(lessons)
        with self._db.session_scope(session) as s:
            s.add_all(created)
            s.flush()
            for lesson in created:
                s.refresh(lesson)
        return created

    def get(self, lesson_id: str, session: Session | None = None) -> Lesson | None:
        """Return a lesson by ID, or None if not found."""
        with self._db.session_scope(session) as s:
            return s.get(Lesson, lesson_id)

    def require(self, lesson_id: str, session: Session | None = None) -> Lesson:
        """Return a lesson by ID.

        Raises:
            LessonNotFoundError: If the lesson doesn't exist.
        """
        lesson = self.get(lesson_id, session=session)
        if lesson is None:
            raise LessonNotFoundError(f"Lesson {lesson_id} not found")
        return lesson

    def list_all(self) -> list[Lesson]:
        """List all lessons, ordered by date then time."""
        with self._db.session_scope() as s:
            stmt = select(Lesson).order_by(Lesson.date, Lesson.time)
            return list(s.execute(stmt).scalars().all())

    def list_matching(self, predicate: LessonFilter) -> list[Lesson]:
        """List lessons matching a predicate, ordered by date then time."""
        with self._db.session_scope() as s:
            stmt = (
                select(Lesson)
                .where(predicate.where_clause())
                .order_by(Lesson.date, Lesson.time)
            )
            return list(s.execute(stmt).scalars().all())

    def list_by_course(self, course_id: str) -> list[Lesson]:
        """List the lessons generated from a course, ordered by date."""
        with self._db.session_scope() as s:
            stmt = select(Lesson).where(Lesson.course_id == course_id).order_by(Lesson.date)
            return list(s.execute(stmt).scalars().all())

    def list_open(
        self,
        age_group: str | None = None,
        on_or_after: dt.date | None = None,
    ) -> list[Lesson]:
        """List lessons that still have a free confirmed spot.

        Args:
            age_group: Only lessons for this age group (optional).
            on_or_after: Only lessons dated on or after this day (optional).

        Returns:
            Lessons with ``enrolled_count < capacity``, ordered by date then time.
        """
        with self._db.session_scope() as s:
            stmt = select(Lesson).where(Lesson.enrolled_count < Lesson.capacity)
            if age_group is not None:
                stmt = stmt.where(Lesson.age_group == age_group)
            if on_or_after is not None:
                stmt = stmt.where(Lesson.date >= on_or_after)
            stmt = stmt.order_by(Lesson.date, Lesson.time)
            return list(s.execute(stmt).scalars().all())

    def update(self, lesson_id: str, changes: LessonUpdate) -> Lesson:
        """Apply administrative field edits to one lesson.

        Raises:
            LessonNotFoundError: If the lesson doesn't exist.
        """
        with self._db.session_scope() as s:
            lesson = s.get(Lesson, lesson_id)
            if lesson is None:
                raise LessonNotFoundError(f"Lesson {lesson_id} not found")
            for name, value in changes.values().items():
                setattr(lesson, name, value)
            s.flush()
            return lesson

    def adjust_enrolled_count(
        self, lesson_id: str, delta: int, session: Session | None = None
    ) -> Lesson:
        """Add ``delta`` to a lesson's enrolled count, flooring the result at zero.

        The read-modify-write happens in a single UPDATE statement.

        Raises:
            LessonNotFoundError: If the lesson doesn't exist.
        """
        with self._db.session_scope(session) as s:
            new_count = Lesson.enrolled_count + delta
            stmt = (
                update(Lesson)
                .where(Lesson.id == lesson_id)
                .values(enrolled_count=case((new_count < 0, 0), else_=new_count))
                .execution_options(synchronize_session=False)
            )
            result = s.execute(stmt)
            if result.rowcount == 0:
                raise LessonNotFoundError(f"Lesson {lesson_id} not found")
            lesson = s.get(Lesson, lesson_id, populate_existing=True)
            assert lesson is not None
            return lesson

    def bulk_update(self, predicate: LessonFilter, changes: LessonUpdate) -> int:
        """Apply the same field edits to every lesson matching a predicate.

        Returns:
            Number of lessons changed.
        """
        if changes.is_empty():
            return 0
        with self._db.session_scope() as s:
            stmt = (
                update(Lesson)
                .where(predicate.where_clause())
                .values(**changes.values())
                .execution_options(synchronize_session=False)
            )
            count = s.execute(stmt).rowcount
        logger.info("Bulk-updated %d lessons", count)
        return count

    def bulk_delete(self, predicate: LessonFilter) -> int:
        """Delete every lesson matching a predicate (registrations cascade).

        Returns:
            Number of lessons deleted.
        """
        with self._db.session_scope() as s:
            stmt = (
                delete(Lesson)
                .where(predicate.where_clause())
                .execution_options(synchronize_session=False)
            )
            count = s.execute(stmt).rowcount
        logger.info("Bulk-deleted %d lessons", count)
        return count

    def delete(self, lesson_id: str) -> None:
        """Delete a single lesson.

        Raises:
            LessonNotFoundError: If the lesson doesn't exist.
        """
        with self._db.session_scope() as s:
            lesson = s.get(Lesson, lesson_id)
            if lesson is None:
                raise LessonNotFoundError(f"Lesson {lesson_id} not found")
            s.delete(lesson)
