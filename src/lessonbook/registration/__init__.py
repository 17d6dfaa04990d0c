"""Registration engine and bulk cohort assignment."""

from lessonbook.registration.allocation import allocate_seat
from lessonbook.registration.bulk import BulkAssigner, PairOutcome
from lessonbook.registration.engine import (
    RegistrationEngine,
    cancellation_deadline,
    is_past_deadline,
)
from lessonbook.registration.exceptions import (
    CancellationDeadlineError,
    DuplicateRegistrationError,
    RegistrationError,
)
from lessonbook.registration.locks import LessonLocks
from lessonbook.registration.models import (
    AdminOverride,
    AssignmentError,
    AvailableLesson,
    BulkAssignmentResult,
    BulkRegisterResult,
    OperationResult,
    RegistrationPolicy,
    SeatAllocation,
)

__all__ = [
    "AdminOverride",
    "AssignmentError",
    "AvailableLesson",
    "BulkAssigner",
    "BulkAssignmentResult",
    "BulkRegisterResult",
    "CancellationDeadlineError",
    "DuplicateRegistrationError",
    "LessonLocks",
    "OperationResult",
    "PairOutcome",
    "RegistrationEngine",
    "RegistrationError",
    "RegistrationPolicy",
    "SeatAllocation",
    "allocate_seat",
    "cancellation_deadline",
    "is_past_deadline",
]
