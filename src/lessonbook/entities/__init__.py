"""Entities - validated factories for lessons, participants and courses."""

from lessonbook.entities.exceptions import ValidationError
from lessonbook.entities.factories import (
    create_course,
    create_lesson,
    create_participant,
    is_valid_hex_color,
    parse_iso_date,
)

__all__ = [
    "ValidationError",
    "create_course",
    "create_lesson",
    "create_participant",
    "is_valid_hex_color",
    "parse_iso_date",
]
