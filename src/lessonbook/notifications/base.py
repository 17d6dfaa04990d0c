"""Notification sink interface and its no-op implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from lessonbook.store import Lesson, Participant, RegistrationStatus


class NotificationSink(Protocol):
    """Interface for registration notifications."""

    async def send_participant_confirmation(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        """Tell the participant the outcome of their registration."""
        ...

    async def send_admin_notification(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        """Tell the administrator about a new registration."""
        ...


class NoOpNotifier:
    """Notification sink that does nothing. Used when e-mail is not configured."""

    async def send_participant_confirmation(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        return None

    async def send_admin_notification(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        return None
