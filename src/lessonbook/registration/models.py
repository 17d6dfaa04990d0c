"""Data models for the Registration module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lessonbook.store import Lesson, Registration


@dataclass(frozen=True)
class RegistrationPolicy:
    """Configurable registration rules.

    Attributes:
        allow_duplicate_direct: Let the direct ``register`` and substitution
            paths create a second active registration for a pair. Self-service
            and bulk assignment always refuse duplicates.
    """

    allow_duplicate_direct: bool = True


@dataclass
class AdminOverride:
    """Constraints an admin action skipped.

    Attributes:
        reason: Human-readable list of the bypassed constraints.
    """

    reason: str


@dataclass
class OperationResult:
    """Outcome of a self-service or admin operation.

    Attributes:
        success: Whether the operation was carried out.
        registration: The registration created or cancelled, if any.
        new_registration: The registration created by a transfer.
        message: Confirmation text on success.
        error: Reason for failure.
        admin_override: Set when an admin action bypassed a constraint.
    """

    success: bool
    registration: Registration | None = None
    new_registration: Registration | None = None
    message: str | None = None
    error: str | None = None
    admin_override: AdminOverride | None = None

    @classmethod
    def failed(cls, error: str) -> OperationResult:
        return cls(success=False, error=error)


@dataclass
class SeatAllocation:
    """Result of placing a participant into a lesson.

    Attributes:
        registration: The new registration.
        lesson: Lesson state after the allocation.
        over_capacity: True if a forced registration was confirmed into a full lesson.
    """

    registration: Registration
    lesson: Lesson
    over_capacity: bool = False


@dataclass
class BulkRegisterResult:
    """Outcome of registering one participant into several lessons.

    Attributes:
        success: False only when the participant doesn't exist.
        registrations: Registrations created, in lesson order.
        successful: Number of registrations created.
        errors: One message per lesson that could not be registered.
    """

    success: bool
    registrations: list[Registration] = field(default_factory=list)
    successful: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class AssignmentError:
    """A participant/lesson pair that bulk assignment could not process."""

    participant_id: str
    lesson_id: str
    error: str


@dataclass
class BulkAssignmentResult:
    """Aggregate outcome of assigning a cohort to a set of lessons.

    Attributes:
        total_registrations: Size of the participant x lesson cross product.
        successful: Pairs registered as confirmed.
        skipped: Pairs that already had an active registration.
        waitlisted: Pairs registered on the waitlist.
        errors: Pairs that failed, in processing order.
    """

    total_registrations: int = 0
    successful: int = 0
    skipped: int = 0
    waitlisted: int = 0
    errors: list[AssignmentError] = field(default_factory=list)


@dataclass
class AvailableLesson:
    """A lesson open to a participant, with its free spot count."""

    lesson: Lesson
    available_spots: int
