"""Scheduling - Expands course templates into lesson instances."""

from lessonbook.scheduling.models import LessonBatch, RecurringLessonBatch
from lessonbook.scheduling.scheduler import CourseScheduler, weekly_dates

__all__ = [
    "CourseScheduler",
    "LessonBatch",
    "RecurringLessonBatch",
    "weekly_dates",
]
