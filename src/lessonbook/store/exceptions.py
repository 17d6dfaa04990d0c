"""Custom exceptions for the lesson store."""


class StoreError(Exception):
    """Base exception for store errors."""


class LessonNotFoundError(StoreError):
    """Lesson with given ID does not exist."""


class ParticipantNotFoundError(StoreError):
    """Participant with given ID does not exist."""


class ParticipantExistsError(StoreError):
    """Participant with given ID already exists."""


class CourseNotFoundError(StoreError):
    """Course with given ID does not exist."""


class RegistrationNotFoundError(StoreError):
    """Registration with given ID does not exist."""


class InvalidStatusTransitionError(StoreError):
    """Registration cannot move to the requested status (cancelled is terminal)."""
