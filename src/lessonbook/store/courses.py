"""CourseRepository - course templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from lessonbook.store.exceptions import CourseNotFoundError
from lessonbook.store.models import Course

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from lessonbook.store.database import Database


class CourseRepository:
    """Course persistence operations."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, course: Course) -> Course:
        """Insert a course."""
        with self._db.session_scope() as s:
            s.add(course)
            s.flush()
            s.refresh(course)
            return course

    def get(self, course_id: str, session: Session | None = None) -> Course | None:
        """Return a course by ID, or None if not found."""
        with self._db.session_scope(session) as s:
            return s.get(Course, course_id)

    def require(self, course_id: str, session: Session | None = None) -> Course:
        """Return a course by ID.

        Raises:
            CourseNotFoundError: If the course doesn't exist.
        """
        course = self.get(course_id, session=session)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    def list_all(self) -> list[Course]:
        """List all courses ordered by name."""
        with self._db.session_scope() as s:
            stmt = select(Course).order_by(Course.name)
            return list(s.execute(stmt).scalars().all())

    def list_by_age_group(self, age_group: str) -> list[Course]:
        """List the courses for one age group, ordered by name."""
        with self._db.session_scope() as s:
            stmt = select(Course).where(Course.age_group == age_group).order_by(Course.name)
            return list(s.execute(stmt).scalars().all())

    def update(
        self,
        course_id: str,
        name: str | None = None,
        age_group: str | None = None,
        color: str | None = None,
        description: str | None = None,
    ) -> Course:
        """Update course fields. Only provided fields are updated.

        Already-generated lessons keep their age group.

        Raises:
            CourseNotFoundError: If the course doesn't exist.
        """
        with self._db.session_scope() as s:
            course = s.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course {course_id} not found")

            if name is not None:
                course.name = name
            if age_group is not None:
                course.age_group = age_group
            if color is not None:
                course.color = color
            if description is not None:
                course.description = description

            s.flush()
            return course

    def delete(self, course_id: str) -> None:
        """Delete a course. Its lessons stay, unlinked.

        Raises:
            CourseNotFoundError: If the course doesn't exist.
        """
        with self._db.session_scope() as s:
            course = s.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course {course_id} not found")
            s.delete(course)
