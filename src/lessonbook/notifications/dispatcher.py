"""Background delivery of registration notifications."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lessonbook.notifications.base import NotificationSink
    from lessonbook.store import Lesson, Participant, RegistrationStatus

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Runs notification sends off the request path.

    Both notifications for a registration are sent concurrently on a worker
    thread. Failures are logged and never reach the caller.
    """

    def __init__(self, sink: NotificationSink, max_workers: int = 2) -> None:
        self.sink = sink
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="lessonbook-notify"
        )

    def dispatch(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> Future[None]:
        """Schedule the participant and admin notifications.

        Returns:
            Future that completes once both sends have finished or failed.
        """
        return self._executor.submit(self._deliver, participant, lesson, status)

    def _deliver(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        try:
            asyncio.run(self._send_all(participant, lesson, status))
        except Exception:
            logger.exception("Notification delivery crashed for lesson %s", lesson.id)

    async def _send_all(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        results = await asyncio.gather(
            self.sink.send_participant_confirmation(participant, lesson, status),
            self.sink.send_admin_notification(participant, lesson, status),
            return_exceptions=True,
        )
        for kind, result in zip(("participant", "admin"), results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    "Failed to send %s notification for lesson %s",
                    kind,
                    lesson.id,
                    exc_info=result,
                )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for pending sends."""
        self._executor.shutdown(wait=wait)
