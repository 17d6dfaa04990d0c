"""BulkAssigner - registers a cohort of participants across a set of lessons."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from lessonbook.registration.allocation import allocate_seat
from lessonbook.registration.locks import LessonLocks
from lessonbook.registration.models import AssignmentError, BulkAssignmentResult
from lessonbook.store import LessonNotFoundError, RegistrationStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lessonbook.store import Store

logger = logging.getLogger(__name__)


class PairOutcome(StrEnum):
    """What happened to one participant/lesson pair."""

    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"
    SKIPPED = "skipped"


class BulkAssigner:
    """Assigns every participant to every lesson, reporting per-pair results.

    Failures are collected in the result instead of being raised, and no
    notifications are sent.
    """

    def __init__(self, store: Store, locks: LessonLocks | None = None) -> None:
        """Initialize the BulkAssigner.

        Args:
            store: Store holding lessons, participants and registrations.
            locks: Per-lesson lock registry; pass the engine's to share it.
        """
        self.store = store
        self.locks = locks or LessonLocks()

    def assign_group_to_lessons(
        self, participant_ids: Sequence[str], lesson_ids: Sequence[str]
    ) -> BulkAssignmentResult:
        """Register each participant into each lesson.

        Pairs that already hold an active registration are skipped. A missing
        participant yields one error per lesson; a missing lesson yields one
        error for the pair.

        Returns:
            Counts over the full cross product plus the ordered error list.
        """
        result = BulkAssignmentResult(total_registrations=len(participant_ids) * len(lesson_ids))

        for participant_id in participant_ids:
            if self.store.participants.get(participant_id) is None:
                for lesson_id in lesson_ids:
                    result.errors.append(
                        AssignmentError(
                            participant_id=participant_id,
                            lesson_id=lesson_id,
                            error=f"Participant {participant_id} not found",
                        )
                    )
                continue

            for lesson_id in lesson_ids:
                try:
                    outcome = self._assign_pair(participant_id, lesson_id)
                except LessonNotFoundError as e:
                    result.errors.append(AssignmentError(participant_id, lesson_id, str(e)))
                    continue
                except Exception as e:
                    logger.exception(
                        "Bulk assignment failed for participant %s, lesson %s",
                        participant_id,
                        lesson_id,
                    )
                    result.errors.append(AssignmentError(participant_id, lesson_id, str(e)))
                    continue

                if outcome is PairOutcome.CONFIRMED:
                    result.successful += 1
                elif outcome is PairOutcome.WAITLISTED:
                    result.waitlisted += 1
                else:
                    result.skipped += 1

        logger.info(
            "Bulk assignment: %d pairs, %d confirmed, %d waitlisted, %d skipped, %d errors",
            result.total_registrations,
            result.successful,
            result.waitlisted,
            result.skipped,
            len(result.errors),
        )
        return result

    def _assign_pair(self, participant_id: str, lesson_id: str) -> PairOutcome:
        with self.locks.hold(lesson_id), self.store.transaction() as s:
            active = self.store.registrations.get_active_by_participant_and_lesson(
                participant_id, lesson_id, session=s
            )
            if active is not None:
                return PairOutcome.SKIPPED
            allocation = allocate_seat(self.store, s, lesson_id, participant_id)

        if allocation.registration.registration_status is RegistrationStatus.CONFIRMED:
            return PairOutcome.CONFIRMED
        return PairOutcome.WAITLISTED
