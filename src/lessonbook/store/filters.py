"""Typed lesson predicates and field updates for bulk repository operations."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_

from lessonbook.store.models import Lesson

if TYPE_CHECKING:
    import datetime as dt

    from sqlalchemy import ColumnElement


@dataclass(frozen=True)
class LessonFilter:
    """A conjunction of lesson predicates.

    Build with the ``by_*`` constructors and combine with ``&``::

        LessonFilter.by_course(course_id) & LessonFilter.by_day_of_week("Monday")
    """

    clauses: tuple[ColumnElement[bool], ...]

    @classmethod
    def by_id(cls, lesson_id: str) -> LessonFilter:
        return cls((Lesson.id == lesson_id,))

    @classmethod
    def by_day_of_week(cls, day_of_week: str) -> LessonFilter:
        return cls((Lesson.day_of_week == day_of_week,))

    @classmethod
    def by_course(cls, course_id: str) -> LessonFilter:
        return cls((Lesson.course_id == course_id,))

    @classmethod
    def by_age_group(cls, age_group: str) -> LessonFilter:
        return cls((Lesson.age_group == age_group,))

    @classmethod
    def by_date(cls, lesson_date: dt.date) -> LessonFilter:
        return cls((Lesson.date == lesson_date,))

    def __and__(self, other: LessonFilter) -> LessonFilter:
        return LessonFilter(self.clauses + other.clauses)

    def where_clause(self) -> ColumnElement[bool]:
        """Render the predicate as a single SQL expression."""
        return and_(*self.clauses)


@dataclass(frozen=True)
class LessonUpdate:
    """Administrative field edits for lessons. Only fields that are set are written.

    ``enrolled_count`` is deliberately absent; it only changes through the
    registration engine.
    """

    title: str | None = None
    date: dt.date | None = None
    day_of_week: str | None = None
    time: str | None = None
    location: str | None = None
    age_group: str | None = None
    capacity: int | None = None

    def values(self) -> dict[str, Any]:
        """Return the column values to write."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.values()
