"""CourseScheduler - expands course templates into lesson instances."""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

from lessonbook.entities import ValidationError, create_lesson, parse_iso_date
from lessonbook.scheduling.models import LessonBatch, RecurringLessonBatch

if TYPE_CHECKING:
    from lessonbook.store import Course, Lesson, Store

logger = logging.getLogger(__name__)


def weekly_dates(start_date: dt.date | str, weeks_count: int) -> list[dt.date]:
    """Return ``weeks_count`` dates seven days apart, starting at ``start_date``.

    Each date is computed as ``start + 7 * i`` days on the calendar value, so
    month and year boundaries are crossed without drift.

    Raises:
        ValidationError: If ``weeks_count`` is below 1 or the start date is malformed.
    """
    if isinstance(weeks_count, bool) or not isinstance(weeks_count, int) or weeks_count < 1:
        raise ValidationError("weeks_count", "Weeks count must be at least 1")
    start = parse_iso_date(start_date, field="start_date")
    return [start + dt.timedelta(days=7 * i) for i in range(weeks_count)]


class CourseScheduler:
    """Generates and stores lesson instances from a course template."""

    def __init__(self, store: Store) -> None:
        """Initialize the CourseScheduler.

        Args:
            store: Store used to look up courses and persist lessons.
        """
        self.store = store

    def bulk_create_lessons(self, batch: LessonBatch) -> list[Lesson]:
        """Create one lesson per date in ``batch.dates``.

        Args:
            batch: Shared lesson attributes and the explicit dates.

        Returns:
            The stored lessons, in input-date order.

        Raises:
            ValidationError: If the date list is empty or a date is malformed.
            CourseNotFoundError: If the course doesn't exist.
        """
        if not batch.dates:
            raise ValidationError("dates", "At least one date is required")

        course = self.store.courses.require(batch.course_id)
        dates = [parse_iso_date(d) for d in batch.dates]

        lessons = [self._lesson_for_date(course, batch, lesson_date) for lesson_date in dates]
        created = self.store.lessons.add_many(lessons)

        logger.info(
            "Created %d lessons for course %s (%s .. %s)",
            len(created),
            course.id,
            dates[0].isoformat(),
            dates[-1].isoformat(),
        )
        return created

    def create_recurring_lessons(self, batch: RecurringLessonBatch) -> list[Lesson]:
        """Create ``batch.weeks_count`` weekly lessons starting at ``batch.start_date``.

        Returns:
            The stored lessons in chronological order.

        Raises:
            ValidationError: If weeks_count < 1 or the start date is malformed.
            CourseNotFoundError: If the course doesn't exist.
        """
        dates: list[dt.date | str] = list(weekly_dates(batch.start_date, batch.weeks_count))
        return self.bulk_create_lessons(
            LessonBatch(
                course_id=batch.course_id,
                title=batch.title,
                location=batch.location,
                time=batch.time,
                day_of_week=batch.day_of_week,
                capacity=batch.capacity,
                dates=dates,
            )
        )

    @staticmethod
    def _lesson_for_date(course: Course, batch: LessonBatch, lesson_date: dt.date) -> Lesson:
        return create_lesson(
            title=batch.title,
            date=lesson_date,
            day_of_week=batch.day_of_week,
            time=batch.time,
            location=batch.location,
            age_group=course.age_group,
            capacity=batch.capacity,
            course_id=course.id,
        )
