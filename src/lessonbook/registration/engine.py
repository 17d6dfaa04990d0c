"""RegistrationEngine - capacity, waitlist and cancellation rules."""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

from lessonbook.registration.allocation import allocate_seat
from lessonbook.registration.exceptions import (
    CancellationDeadlineError,
    DuplicateRegistrationError,
)
from lessonbook.registration.locks import LessonLocks
from lessonbook.registration.models import (
    AdminOverride,
    AvailableLesson,
    BulkRegisterResult,
    OperationResult,
    RegistrationPolicy,
    SeatAllocation,
)
from lessonbook.store import LessonNotFoundError, RegistrationStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy.orm import Session

    from lessonbook.notifications import NotificationDispatcher
    from lessonbook.store import Lesson, Participant, Registration, Store

logger = logging.getLogger(__name__)

DEADLINE_MESSAGE = "Cannot cancel after midnight before the lesson"


def cancellation_deadline(lesson_date: dt.date) -> dt.datetime:
    """Return local midnight at the start of the lesson day."""
    return dt.datetime.combine(lesson_date, dt.time.min)


def _as_local(moment: dt.datetime) -> dt.datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def is_past_deadline(lesson: Lesson, now: dt.datetime) -> bool:
    """Whether ``now`` is at or after the cancellation deadline of ``lesson``."""
    return _as_local(now) >= cancellation_deadline(lesson.date)


class RegistrationEngine:
    """Allocates participants to lessons under the capacity constraint.

    Low-level operations (``register``, ``bulk_register``,
    ``register_for_substitution``, ``cancel_without_deadline``) raise on
    missing records. Admin and self-service operations return an
    ``OperationResult`` describing expected failures instead.

    Each read-decide-write runs in one transaction while holding the
    lesson's lock, so concurrent callers never confirm past capacity.
    """

    def __init__(
        self,
        store: Store,
        dispatcher: NotificationDispatcher | None = None,
        policy: RegistrationPolicy | None = None,
        locks: LessonLocks | None = None,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> None:
        """Initialize the RegistrationEngine.

        Args:
            store: Store holding lessons, participants and registrations.
            dispatcher: Background notification dispatcher (optional).
            policy: Registration rules; defaults to ``RegistrationPolicy()``.
            locks: Per-lesson lock registry, shared with other writers.
            clock: Source of the current local time.
        """
        self.store = store
        self.dispatcher = dispatcher
        self.policy = policy or RegistrationPolicy()
        self.locks = locks or LessonLocks()
        self._clock = clock or dt.datetime.now

    # --- core primitives ---

    def register(self, lesson_id: str, participant: Participant) -> Registration:
        """Register a participant, storing the participant first if needed.

        The registration is confirmed while the lesson has a free spot and
        waitlisted otherwise.

        Args:
            lesson_id: The lesson's unique ID.
            participant: Participant to register; inserted if not yet stored.

        Returns:
            The created registration.

        Raises:
            LessonNotFoundError: If the lesson doesn't exist.
            DuplicateRegistrationError: If duplicates are disallowed by policy
                and the pair already has an active registration.
        """
        allocation = self._register(
            lesson_id,
            participant,
            check_duplicate=not self.policy.allow_duplicate_direct,
        )
        return allocation.registration

    def bulk_register(
        self, lesson_id: str, participants: Iterable[Participant]
    ) -> list[Registration]:
        """Register participants one after another, stopping at the first error.

        Returns:
            Registrations in input order.
        """
        return [self.register(lesson_id, participant) for participant in participants]

    def register_for_substitution(
        self, lesson_id: str, participant: Participant, missed_lesson_id: str
    ) -> Registration:
        """Register a participant as a make-up for a missed lesson.

        The missed lesson is recorded but not checked.

        Raises:
            LessonNotFoundError: If the lesson doesn't exist.
            DuplicateRegistrationError: As for ``register``.
        """
        allocation = self._register(
            lesson_id,
            participant,
            missed_lesson_id=missed_lesson_id,
            check_duplicate=not self.policy.allow_duplicate_direct,
        )
        return allocation.registration

    def cancel(
        self, registration_id: str, current_time: dt.datetime | None = None
    ) -> OperationResult:
        """Cancel a registration unless its lesson day has already begun.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
        """
        try:
            registration = self.cancel_or_raise(registration_id, current_time)
        except CancellationDeadlineError as e:
            return OperationResult.failed(str(e))
        return OperationResult(
            success=True, registration=registration, message="Registration cancelled"
        )

    def cancel_or_raise(
        self, registration_id: str, current_time: dt.datetime | None = None
    ) -> Registration:
        """Cancel a registration, enforcing the midnight deadline.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
            CancellationDeadlineError: If ``current_time`` is at or after
                midnight of the lesson day. Nothing is changed.
        """
        return self._cancel(registration_id, current_time or self._clock())

    def cancel_without_deadline(self, registration_id: str) -> Registration:
        """Cancel a registration regardless of the deadline.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
        """
        return self._cancel(registration_id, None)

    # --- queries ---

    def available_substitution_lessons(self, age_group: str) -> list[Lesson]:
        """List lessons of an age group that still have a free spot."""
        return self.store.lessons.list_open(age_group=age_group)

    def registrations_for_lesson(self, lesson_id: str) -> list[Registration]:
        return self.store.registrations.list_by_lesson(lesson_id)

    def registrations_for_participant(self, participant_id: str) -> list[Registration]:
        return self.store.registrations.list_by_participant(participant_id)

    # --- admin overrides ---

    def admin_register(
        self, lesson_id: str, participant_id: str, force_capacity: bool = False
    ) -> OperationResult:
        """Register a stored participant, skipping the age-group check.

        Args:
            lesson_id: The lesson's unique ID.
            participant_id: The participant's unique ID.
            force_capacity: Confirm even when the lesson is full.

        Returns:
            Result whose ``admin_override`` names each skipped constraint.
        """
        participant = self.store.participants.get(participant_id)
        if participant is None:
            return OperationResult.failed(f"Participant {participant_id} not found")
        if self.store.lessons.get(lesson_id) is None:
            return OperationResult.failed(f"Lesson {lesson_id} not found")

        try:
            allocation = self._register(lesson_id, participant, force_capacity=force_capacity)
        except LessonNotFoundError as e:
            return OperationResult.failed(str(e))

        lesson = allocation.lesson
        reasons = []
        if participant.age_group != lesson.age_group:
            reasons.append(
                f"Age group mismatch overridden (participant: {participant.age_group}, "
                f"lesson: {lesson.age_group})"
            )
        if allocation.over_capacity:
            reasons.append(
                f"Capacity limit overridden ({lesson.enrolled_count}/{lesson.capacity})"
            )
        override = AdminOverride(reason="; ".join(reasons)) if reasons else None
        if override is not None:
            logger.info("Admin registration %s: %s", allocation.registration.id, override.reason)

        return OperationResult(
            success=True,
            registration=allocation.registration,
            message=f"Participant registered ({allocation.registration.status})",
            admin_override=override,
        )

    def admin_cancel(
        self, registration_id: str, current_time: dt.datetime | None = None
    ) -> OperationResult:
        """Cancel any registration, ignoring the midnight deadline."""
        registration = self.store.registrations.get(registration_id)
        if registration is None:
            return OperationResult.failed(f"Registration {registration_id} not found")

        lesson = self.store.lessons.get(registration.lesson_id)
        override = None
        if lesson is not None and is_past_deadline(lesson, current_time or self._clock()):
            override = AdminOverride(
                reason=f"Cancellation deadline overridden (lesson on {lesson.date.isoformat()})"
            )

        cancelled = self.cancel_without_deadline(registration_id)
        return OperationResult(
            success=True,
            registration=cancelled,
            message="Registration cancelled by admin",
            admin_override=override,
        )

    def admin_bulk_register(
        self, participant_id: str, lesson_ids: Iterable[str]
    ) -> BulkRegisterResult:
        """Register one stored participant into each of several lessons.

        Missing lessons are reported in ``errors`` and do not stop the rest.
        """
        participant = self.store.participants.get(participant_id)
        if participant is None:
            return BulkRegisterResult(
                success=False, errors=[f"Participant {participant_id} not found"]
            )

        result = BulkRegisterResult(success=True)
        for lesson_id in lesson_ids:
            try:
                allocation = self._register(lesson_id, participant)
            except LessonNotFoundError as e:
                result.errors.append(str(e))
                continue
            result.registrations.append(allocation.registration)
        result.successful = len(result.registrations)
        logger.info(
            "Admin bulk registration of %s: %d created, %d errors",
            participant_id,
            result.successful,
            len(result.errors),
        )
        return result

    # --- participant self-service ---

    def participant_register(self, lesson_id: str, participant_id: str) -> OperationResult:
        """Register the calling participant into a lesson of their age group."""
        participant = self.store.participants.get(participant_id)
        if participant is None:
            return OperationResult.failed("Participant not found")
        lesson = self.store.lessons.get(lesson_id)
        if lesson is None:
            return OperationResult.failed("Lesson not found")
        if lesson.age_group != participant.age_group:
            return OperationResult.failed(_age_group_error(lesson, participant))

        try:
            allocation = self._register(lesson_id, participant, check_duplicate=True)
        except DuplicateRegistrationError:
            return OperationResult.failed("You are already registered for this lesson")

        registration = allocation.registration
        message = (
            "Registration confirmed"
            if registration.registration_status is RegistrationStatus.CONFIRMED
            else "Lesson is full, you have been added to the waitlist"
        )
        return OperationResult(success=True, registration=registration, message=message)

    def participant_cancel(
        self,
        registration_id: str,
        participant_id: str,
        current_time: dt.datetime | None = None,
    ) -> OperationResult:
        """Cancel the caller's own registration before the deadline."""
        registration = self.store.registrations.get(registration_id)
        if registration is None:
            return OperationResult.failed("Registration not found")
        if registration.participant_id != participant_id:
            return OperationResult.failed("You are not authorized to cancel this registration")
        return self.cancel(registration_id, current_time)

    def transfer(
        self,
        registration_id: str,
        new_lesson_id: str,
        participant_id: str,
        current_time: dt.datetime | None = None,
    ) -> OperationResult:
        """Move the caller's registration to another lesson.

        The old registration is cancelled (deadline-checked) and the new one
        created in the same transaction; on any failure neither happens.

        Returns:
            Result with the cancelled ``registration`` and the ``new_registration``.
        """
        registration = self.store.registrations.get(registration_id)
        if registration is None:
            return OperationResult.failed("Registration not found")
        if registration.participant_id != participant_id:
            return OperationResult.failed("You are not authorized to transfer this registration")
        if not registration.is_active:
            return OperationResult.failed("Registration is already cancelled")

        participant = self.store.participants.get(participant_id)
        if participant is None:
            return OperationResult.failed("Participant not found")
        new_lesson = self.store.lessons.get(new_lesson_id)
        if new_lesson is None:
            return OperationResult.failed("Lesson not found")
        if new_lesson.age_group != participant.age_group:
            return OperationResult.failed(_age_group_error(new_lesson, participant))

        now = current_time or self._clock()
        try:
            with (
                self.locks.hold(registration.lesson_id, new_lesson_id),
                self.store.transaction() as s,
            ):
                self._refuse_duplicate(s, participant_id, new_lesson_id)
                cancelled = self._cancel_in(s, registration_id, now)
                allocation = allocate_seat(self.store, s, new_lesson_id, participant_id)
        except DuplicateRegistrationError:
            return OperationResult.failed("You are already registered for the new lesson")
        except CancellationDeadlineError as e:
            return OperationResult.failed(str(e))

        logger.info(
            "Transferred participant %s from lesson %s to %s",
            participant_id,
            registration.lesson_id,
            new_lesson_id,
        )
        self._notify(participant, allocation)
        return OperationResult(
            success=True,
            registration=cancelled,
            new_registration=allocation.registration,
            message=f"Transferred to {allocation.lesson.title}",
        )

    def available_lessons_for_participant(
        self, participant_id: str, today: dt.date | None = None
    ) -> list[AvailableLesson]:
        """List upcoming open lessons of the participant's age group.

        Lessons the participant has any registration for, cancelled ones
        included, are left out.

        Raises:
            ParticipantNotFoundError: If the participant doesn't exist.
        """
        participant = self.store.participants.require(participant_id)
        today = today or self._clock().date()
        registered = {
            r.lesson_id for r in self.store.registrations.list_by_participant(participant_id)
        }
        lessons = self.store.lessons.list_open(age_group=participant.age_group, on_or_after=today)
        return [
            AvailableLesson(lesson=lesson, available_spots=lesson.available_spots)
            for lesson in lessons
            if lesson.id not in registered
        ]

    # --- internals ---

    def _register(
        self,
        lesson_id: str,
        participant: Participant,
        *,
        missed_lesson_id: str | None = None,
        check_duplicate: bool = False,
        force_capacity: bool = False,
    ) -> SeatAllocation:
        with self.locks.hold(lesson_id), self.store.transaction() as s:
            stored = self.store.participants.ensure(participant, session=s)
            if check_duplicate:
                self._refuse_duplicate(s, stored.id, lesson_id)
            allocation = allocate_seat(
                self.store,
                s,
                lesson_id,
                stored.id,
                missed_lesson_id=missed_lesson_id,
                force_capacity=force_capacity,
            )
        logger.info(
            "Registered participant %s for lesson %s as %s",
            stored.id,
            lesson_id,
            allocation.registration.status,
        )
        self._notify(stored, allocation)
        return allocation

    def _refuse_duplicate(self, session: Session, participant_id: str, lesson_id: str) -> None:
        active = self.store.registrations.get_active_by_participant_and_lesson(
            participant_id, lesson_id, session=session
        )
        if active is not None:
            raise DuplicateRegistrationError(
                f"Participant {participant_id} is already registered for lesson {lesson_id}"
            )

    def _cancel(self, registration_id: str, now: dt.datetime | None) -> Registration:
        lesson_id = self.store.registrations.require(registration_id).lesson_id
        with self.locks.hold(lesson_id), self.store.transaction() as s:
            registration = self._cancel_in(s, registration_id, now)
        logger.info("Cancelled registration %s for lesson %s", registration_id, lesson_id)
        return registration

    def _cancel_in(
        self, session: Session, registration_id: str, now: dt.datetime | None
    ) -> Registration:
        # now=None skips the deadline check
        registration = self.store.registrations.require(registration_id, session=session)
        lesson = self.store.lessons.require(registration.lesson_id, session=session)
        if now is not None and is_past_deadline(lesson, now):
            raise CancellationDeadlineError(DEADLINE_MESSAGE)

        if registration.registration_status is RegistrationStatus.CONFIRMED:
            self.store.lessons.adjust_enrolled_count(lesson.id, -1, session=session)
        return self.store.registrations.update_status(
            registration_id, RegistrationStatus.CANCELLED, session=session
        )

    def _notify(self, participant: Participant, allocation: SeatAllocation) -> None:
        if self.dispatcher is None:
            return
        try:
            self.dispatcher.dispatch(
                participant, allocation.lesson, allocation.registration.registration_status
            )
        except Exception:
            logger.exception(
                "Could not schedule notifications for registration %s",
                allocation.registration.id,
            )


def _age_group_error(lesson: Lesson, participant: Participant) -> str:
    return (
        f"This lesson is for age group {lesson.age_group}, "
        f"but the participant is in age group {participant.age_group}"
    )
