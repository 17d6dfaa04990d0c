"""Store - Persistent storage for lessons, participants, courses and registrations."""

from lessonbook.store.exceptions import (
    CourseNotFoundError,
    InvalidStatusTransitionError,
    LessonNotFoundError,
    ParticipantExistsError,
    ParticipantNotFoundError,
    RegistrationNotFoundError,
    StoreError,
)
from lessonbook.store.filters import LessonFilter, LessonUpdate
from lessonbook.store.models import (
    Course,
    Lesson,
    Participant,
    Registration,
    RegistrationStatus,
    generate_id,
)
from lessonbook.store.store import Store

__all__ = [
    "Course",
    "CourseNotFoundError",
    "InvalidStatusTransitionError",
    "Lesson",
    "LessonFilter",
    "LessonNotFoundError",
    "LessonUpdate",
    "Participant",
    "ParticipantExistsError",
    "ParticipantNotFoundError",
    "Registration",
    "RegistrationNotFoundError",
    "RegistrationStatus",
    "Store",
    "StoreError",
    "generate_id",
]
