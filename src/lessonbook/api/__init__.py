"""REST API for lessonbook."""

from lessonbook.api.app import app, create_app
from lessonbook.api.models import (
    APIResponse,
    LessonCreate,
    LessonResponse,
    RegistrationResponse,
)

__all__ = [
    "APIResponse",
    "LessonCreate",
    "LessonResponse",
    "RegistrationResponse",
    "app",
    "create_app",
]
