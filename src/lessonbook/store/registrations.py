"""RegistrationRepository - persisted registration records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from lessonbook.store.exceptions import (
    InvalidStatusTransitionError,
    RegistrationNotFoundError,
)
from lessonbook.store.models import ACTIVE_STATUSES, Registration, RegistrationStatus

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from lessonbook.store.database import Database


class RegistrationRepository:
    """Registration persistence operations.

    Registrations are never physically deleted; they only move to CANCELLED.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, registration: Registration, session: Session | None = None) -> Registration:
        """Insert a registration record."""
        with self._db.session_scope(session) as s:
            s.add(registration)
            s.flush()
            return registration

    def get(self, registration_id: str, session: Session | None = None) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        with self._db.session_scope(session) as s:
            return s.get(Registration, registration_id)

    def require(self, registration_id: str, session: Session | None = None) -> Registration:
        """Return a registration by ID.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
        """
        registration = self.get(registration_id, session=session)
        if registration is None:
            raise RegistrationNotFoundError(f"Registration {registration_id} not found")
        return registration

    def list_all(self) -> list[Registration]:
        """List every registration, oldest first."""
        with self._db.session_scope() as s:
            stmt = select(Registration).order_by(Registration.registered_at)
            return list(s.execute(stmt).scalars().all())

    def list_by_lesson(
        self, lesson_id: str, status: RegistrationStatus | None = None
    ) -> list[Registration]:
        """List a lesson's registrations in registration order.

        Args:
            lesson_id: The lesson's unique ID.
            status: Filter by status (optional).
        """
        with self._db.session_scope() as s:
            stmt = select(Registration).where(Registration.lesson_id == lesson_id)
            if status is not None:
                stmt = stmt.where(Registration.status == status.value)
            stmt = stmt.order_by(Registration.registered_at)
            return list(s.execute(stmt).scalars().all())

    def list_by_participant(self, participant_id: str) -> list[Registration]:
        """List a participant's registrations in registration order."""
        with self._db.session_scope() as s:
            stmt = (
                select(Registration)
                .where(Registration.participant_id == participant_id)
                .order_by(Registration.registered_at)
            )
            return list(s.execute(stmt).scalars().all())

    def get_active_by_participant_and_lesson(
        self, participant_id: str, lesson_id: str, session: Session | None = None
    ) -> Registration | None:
        """Return the confirmed or waitlisted registration for a pair, if any."""
        with self._db.session_scope(session) as s:
            stmt = (
                select(Registration)
                .where(
                    Registration.participant_id == participant_id,
                    Registration.lesson_id == lesson_id,
                    Registration.status.in_(ACTIVE_STATUSES),
                )
                .order_by(Registration.registered_at.desc())
                .limit(1)
            )
            return s.execute(stmt).scalar_one_or_none()

    def get_by_participant_and_lesson(
        self, participant_id: str, lesson_id: str
    ) -> Registration | None:
        """Return the registration for a pair.

        Prefers the active registration; falls back to the most recent
        cancelled one. None if the pair was never registered.
        """
        with self._db.session_scope() as s:
            active = self.get_active_by_participant_and_lesson(
                participant_id, lesson_id, session=s
            )
            if active is not None:
                return active
            stmt = (
                select(Registration)
                .where(
                    Registration.participant_id == participant_id,
                    Registration.lesson_id == lesson_id,
                )
                .order_by(Registration.registered_at.desc())
                .limit(1)
            )
            return s.execute(stmt).scalar_one_or_none()

    def update_status(
        self,
        registration_id: str,
        status: RegistrationStatus,
        session: Session | None = None,
    ) -> Registration:
        """Move a registration to a new status.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
            InvalidStatusTransitionError: If the registration is already cancelled
                and the new status is not CANCELLED.
        """
        with self._db.session_scope(session) as s:
            registration = s.get(Registration, registration_id)
            if registration is None:
                raise RegistrationNotFoundError(f"Registration {registration_id} not found")
            current = registration.registration_status
            if current is RegistrationStatus.CANCELLED and status is not current:
                raise InvalidStatusTransitionError(
                    f"Registration {registration_id} is cancelled and cannot become {status}"
                )
            registration.registration_status = status
            s.flush()
            return registration
