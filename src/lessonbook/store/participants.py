"""ParticipantRepository - participants and their course memberships."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from lessonbook.store.exceptions import (
    CourseNotFoundError,
    ParticipantExistsError,
    ParticipantNotFoundError,
)
from lessonbook.store.models import Course, Participant, course_participants

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from lessonbook.store.database import Database


class ParticipantRepository:
    """Participant persistence operations."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, participant: Participant) -> Participant:
        """Insert a new participant.

        Raises:
            ParticipantExistsError: If a participant with the same ID exists.
        """
        try:
            with self._db.session_scope() as s:
                s.add(participant)
                s.flush()
                s.refresh(participant)
                return participant
        except IntegrityError as e:
            raise ParticipantExistsError(f"Participant {participant.id} already exists") from e

    def ensure(self, participant: Participant, session: Session | None = None) -> Participant:
        """Insert the participant unless one with the same ID is already stored.

        Idempotent on participant identity: the stored record wins.

        Returns:
            The stored participant.
        """
        with self._db.session_scope(session) as s:
            existing = s.get(Participant, participant.id)
            if existing is not None:
                return existing
            s.add(participant)
            s.flush()
            s.refresh(participant)
            return participant

    def get(self, participant_id: str, session: Session | None = None) -> Participant | None:
        """Return a participant by ID, or None if not found."""
        with self._db.session_scope(session) as s:
            return s.get(Participant, participant_id)

    def require(self, participant_id: str, session: Session | None = None) -> Participant:
        """Return a participant by ID.

        Raises:
            ParticipantNotFoundError: If the participant doesn't exist.
        """
        participant = self.get(participant_id, session=session)
        if participant is None:
            raise ParticipantNotFoundError(f"Participant {participant_id} not found")
        return participant

    def list_all(self) -> list[Participant]:
        """List all participants ordered by name."""
        with self._db.session_scope() as s:
            stmt = select(Participant).order_by(Participant.name)
            return list(s.execute(stmt).scalars().all())

    def link_to_course(self, participant_id: str, course_id: str) -> None:
        """Add a participant to a course cohort. Linking twice is a no-op.

        Raises:
            ParticipantNotFoundError: If the participant doesn't exist.
            CourseNotFoundError: If the course doesn't exist.
        """
        with self._db.session_scope() as s:
            if s.get(Participant, participant_id) is None:
                raise ParticipantNotFoundError(f"Participant {participant_id} not found")
            if s.get(Course, course_id) is None:
                raise CourseNotFoundError(f"Course {course_id} not found")
            stmt = select(course_participants).where(
                course_participants.c.course_id == course_id,
                course_participants.c.participant_id == participant_id,
            )
            if s.execute(stmt).first() is None:
                s.execute(
                    course_participants.insert().values(
                        course_id=course_id, participant_id=participant_id
                    )
                )

    def unlink_from_course(self, participant_id: str, course_id: str) -> bool:
        """Remove a participant from a course cohort.

        Returns:
            True if a link was removed.
        """
        with self._db.session_scope() as s:
            result = s.execute(
                delete(course_participants).where(
                    course_participants.c.course_id == course_id,
                    course_participants.c.participant_id == participant_id,
                )
            )
            return result.rowcount > 0

    def list_by_course(self, course_id: str) -> list[Participant]:
        """List the participants linked to a course, ordered by name."""
        with self._db.session_scope() as s:
            stmt = (
                select(Participant)
                .join(
                    course_participants,
                    course_participants.c.participant_id == Participant.id,
                )
                .where(course_participants.c.course_id == course_id)
                .order_by(Participant.name)
            )
            return list(s.execute(stmt).scalars().all())

    def list_course_ids(self, participant_id: str) -> list[str]:
        """List the IDs of the courses a participant belongs to."""
        with self._db.session_scope() as s:
            stmt = select(course_participants.c.course_id).where(
                course_participants.c.participant_id == participant_id
            )
            return list(s.execute(stmt).scalars().all())
