"""Unit tests for CourseScheduler."""

import datetime as dt

import pytest

from lessonbook.entities import ValidationError, create_course
from lessonbook.scheduling import (
    CourseScheduler,
    LessonBatch,
    RecurringLessonBatch,
    weekly_dates,
)
from lessonbook.store import CourseNotFoundError, Store


@pytest.fixture
def course(store: Store):
    return store.courses.add(create_course("Baby Yoga", "3-12 months", "#FF8800"))


@pytest.fixture
def scheduler(store: Store) -> CourseScheduler:
    return CourseScheduler(store)


def _batch(course_id: str, dates: list) -> LessonBatch:
    return LessonBatch(
        course_id=course_id,
        title="Baby Yoga",
        location="Studio 1",
        time="10:00",
        day_of_week="Friday",
        capacity=6,
        dates=dates,
    )


def _recurring(course_id: str, start, weeks: int) -> RecurringLessonBatch:
    return RecurringLessonBatch(
        course_id=course_id,
        title="Baby Yoga",
        location="Studio 1",
        time="10:00",
        day_of_week="Friday",
        capacity=6,
        start_date=start,
        weeks_count=weeks,
    )


@pytest.mark.unit
class TestWeeklyDates:
    """Tests for weekly_dates."""

    def test_four_weeks(self) -> None:
        assert weekly_dates("2024-03-01", 4) == [
            dt.date(2024, 3, 1),
            dt.date(2024, 3, 8),
            dt.date(2024, 3, 15),
            dt.date(2024, 3, 22),
        ]

    def test_crosses_year_boundary(self) -> None:
        assert weekly_dates(dt.date(2024, 12, 20), 3) == [
            dt.date(2024, 12, 20),
            dt.date(2024, 12, 27),
            dt.date(2025, 1, 3),
        ]

    def test_leap_day(self) -> None:
        assert weekly_dates("2024-02-22", 2)[1] == dt.date(2024, 2, 29)

    @pytest.mark.parametrize("weeks", [0, -3])
    def test_weeks_must_be_positive(self, weeks: int) -> None:
        with pytest.raises(ValidationError) as exc_info:
            weekly_dates("2024-03-01", weeks)
        assert exc_info.value.field == "weeks_count"


@pytest.mark.unit
class TestBulkCreateLessons:
    """Tests for CourseScheduler.bulk_create_lessons."""

    def test_one_lesson_per_date_in_order(self, scheduler, course) -> None:
        lessons = scheduler.bulk_create_lessons(
            _batch(course.id, ["2030-01-10", "2030-01-03", "2030-01-17"])
        )

        assert [lesson.date.day for lesson in lessons] == [10, 3, 17]
        assert len({lesson.id for lesson in lessons}) == 3

    def test_copies_course_age_group(self, scheduler, course) -> None:
        lessons = scheduler.bulk_create_lessons(_batch(course.id, ["2030-01-10"]))

        assert lessons[0].age_group == "3-12 months"
        assert lessons[0].course_id == course.id
        assert lessons[0].enrolled_count == 0

    def test_lessons_are_persisted(self, scheduler, course, store: Store) -> None:
        scheduler.bulk_create_lessons(_batch(course.id, ["2030-01-10", "2030-01-17"]))
        assert len(store.lessons.list_all()) == 2

    def test_empty_dates_rejected(self, scheduler, course) -> None:
        with pytest.raises(ValidationError) as exc_info:
            scheduler.bulk_create_lessons(_batch(course.id, []))
        assert exc_info.value.field == "dates"

    def test_missing_course(self, scheduler) -> None:
        with pytest.raises(CourseNotFoundError):
            scheduler.bulk_create_lessons(_batch("nope", ["2030-01-10"]))

    def test_bad_date_creates_nothing(self, scheduler, course, store: Store) -> None:
        with pytest.raises(ValidationError):
            scheduler.bulk_create_lessons(_batch(course.id, ["2030-01-10", "not-a-date"]))
        assert store.lessons.list_all() == []


@pytest.mark.unit
class TestCreateRecurringLessons:
    """Tests for CourseScheduler.create_recurring_lessons."""

    def test_weekly_lessons(self, scheduler, course) -> None:
        lessons = scheduler.create_recurring_lessons(_recurring(course.id, "2024-03-01", 4))

        assert [lesson.date.isoformat() for lesson in lessons] == [
            "2024-03-01",
            "2024-03-08",
            "2024-03-15",
            "2024-03-22",
        ]
        assert {lesson.day_of_week for lesson in lessons} == {"Friday"}

    def test_zero_weeks_rejected(self, scheduler, course, store: Store) -> None:
        with pytest.raises(ValidationError):
            scheduler.create_recurring_lessons(_recurring(course.id, "2024-03-01", 0))
        assert store.lessons.list_all() == []

    def test_missing_course(self, scheduler) -> None:
        with pytest.raises(CourseNotFoundError):
            scheduler.create_recurring_lessons(_recurring("nope", "2024-03-01", 2))
