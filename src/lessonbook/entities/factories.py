"""Factories that build validated entities with fresh identifiers."""

from __future__ import annotations

import datetime as dt
import re

from lessonbook.entities.exceptions import ValidationError
from lessonbook.store.models import Course, Lesson, Participant

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9A-F]{3}){1,2}$", re.IGNORECASE)


def is_valid_hex_color(color: str) -> bool:
    """Check for ``#RGB`` or ``#RRGGBB`` (case-insensitive)."""
    return bool(_HEX_COLOR_RE.fullmatch(color or ""))


def parse_iso_date(value: dt.date | str, field: str = "date") -> dt.date:
    """Coerce an ISO ``YYYY-MM-DD`` string (or a date) to a calendar date.

    Raises:
        ValidationError: If the string is not a valid ISO date.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as e:
        raise ValidationError(field, f"Invalid ISO date: {value!r}") from e


def _require_text(value: str | None, field: str, label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(field, f"{label} is required")
    return value.strip()


def create_lesson(
    title: str,
    date: dt.date | str,
    day_of_week: str,
    time: str,
    location: str,
    age_group: str,
    capacity: int,
    course_id: str | None = None,
) -> Lesson:
    """Create a lesson with a fresh ID and an enrolled count of zero.

    Raises:
        ValidationError: If the date is malformed or capacity is not positive.
    """
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise ValidationError("capacity", "Capacity must be a positive integer")

    return Lesson(
        title=title,
        date=parse_iso_date(date),
        day_of_week=day_of_week,
        time=time,
        location=location,
        age_group=age_group,
        capacity=capacity,
        enrolled_count=0,
        course_id=course_id,
    )


def create_participant(name: str, email: str, phone: str, age_group: str) -> Participant:
    """Create a participant with a fresh ID."""
    return Participant(
        name=name.strip(),
        email=email.strip(),
        phone=phone.strip(),
        age_group=age_group.strip(),
    )


def create_course(
    name: str,
    age_group: str,
    color: str,
    description: str | None = None,
) -> Course:
    """Create a validated course.

    Args:
        name: Course name, must not be blank.
        age_group: Age group inherited by every generated lesson, must not be blank.
        color: Display color, ``#RGB`` or ``#RRGGBB``.
        description: Free text (optional).

    Returns:
        Course with trimmed text fields and a fresh ID.

    Raises:
        ValidationError: Naming the first field that failed.
    """
    clean_name = _require_text(name, "name", "Course name")
    clean_age_group = _require_text(age_group, "age_group", "Age group")
    if not is_valid_hex_color(color):
        raise ValidationError("color", "Color must be a valid hex color")

    return Course(
        name=clean_name,
        age_group=clean_age_group,
        color=color,
        description=description.strip() if description is not None else None,
    )
