"""Capacity decision shared by every registration path."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lessonbook.registration.models import SeatAllocation
from lessonbook.store import Registration, RegistrationStatus

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from lessonbook.store import Store

logger = logging.getLogger(__name__)


def allocate_seat(
    store: Store,
    session: Session,
    lesson_id: str,
    participant_id: str,
    *,
    missed_lesson_id: str | None = None,
    force_capacity: bool = False,
) -> SeatAllocation:
    """Register a participant into a lesson inside an open unit of work.

    Reads the lesson fresh, confirms the registration when a spot is free
    (or when ``force_capacity`` is set) and increments the enrolled count,
    otherwise waitlists it without touching the count. The caller must hold
    the lesson's lock and commit the session.

    Raises:
        LessonNotFoundError: If the lesson doesn't exist.
    """
    lesson = store.lessons.require(lesson_id, session=session)
    full = lesson.enrolled_count >= lesson.capacity

    if full and not force_capacity:
        status = RegistrationStatus.WAITLIST
    else:
        status = RegistrationStatus.CONFIRMED
        lesson = store.lessons.adjust_enrolled_count(lesson_id, 1, session=session)

    registration = store.registrations.add(
        Registration(
            lesson_id=lesson_id,
            participant_id=participant_id,
            status=status.value,
            missed_lesson_id=missed_lesson_id,
        ),
        session=session,
    )
    logger.debug(
        "Participant %s -> lesson %s: %s (%d/%d)",
        participant_id,
        lesson_id,
        status.value,
        lesson.enrolled_count,
        lesson.capacity,
    )
    return SeatAllocation(
        registration=registration,
        lesson=lesson,
        over_capacity=full and force_capacity,
    )
