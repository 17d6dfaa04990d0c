"""Data models for the Scheduling module."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
from dataclasses import dataclass, field


@dataclass
class LessonBatch:
    """Shared attributes for lessons generated on explicit dates.

    Attributes:
        course_id: Course the lessons belong to; its age group is copied onto each.
        title: Lesson title.
        location: Where the lessons take place.
        time: Time-of-day label, e.g. "09:00".
        day_of_week: Day label, e.g. "Monday".
        capacity: Confirmed spots per lesson.
        dates: ISO dates (or dates), one lesson per entry, in this order.
    """

    course_id: str
    title: str
    location: str
    time: str
    day_of_week: str
    capacity: int
    dates: list[dt.date | str] = field(default_factory=list)


@dataclass
class RecurringLessonBatch:
    """Shared attributes for lessons repeating weekly.

    Attributes:
        course_id: Course the lessons belong to.
        title: Lesson title.
        location: Where the lessons take place.
        time: Time-of-day label.
        day_of_week: Day label.
        capacity: Confirmed spots per lesson.
        start_date: First lesson date (inclusive).
        weeks_count: Number of weekly lessons, at least 1.
    """

    course_id: str
    title: str
    location: str
    time: str
    day_of_week: str
    capacity: int
    start_date: dt.date | str
    weeks_count: int
