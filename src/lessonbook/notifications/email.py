"""E-mail notifications over SMTP."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING

from lessonbook.logging import mask_email
from lessonbook.store import RegistrationStatus

if TYPE_CHECKING:
    from lessonbook.store import Lesson, Participant

logger = logging.getLogger(__name__)

DEFAULT_SIGNATURE = "Your activity center team"


class SmtpTransport:
    """Sends prepared messages through an SMTP server using STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self._password = password
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        """Deliver one message. Raises ``smtplib.SMTPException`` or ``OSError`` on failure."""
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            smtp.login(self.user, self._password)
            smtp.send_message(message)


def _lesson_details(lesson: Lesson) -> str:
    return (
        f"- Title: {lesson.title}\n"
        f"- Date: {lesson.date.isoformat()} ({lesson.day_of_week})\n"
        f"- Time: {lesson.time}\n"
        f"- Location: {lesson.location}\n"
        f"- Age group: {lesson.age_group}"
    )


def participant_message_body(
    participant: Participant,
    lesson: Lesson,
    status: RegistrationStatus,
    signature: str = DEFAULT_SIGNATURE,
) -> tuple[str, str]:
    """Build subject and body of the participant confirmation.

    Returns:
        (subject, body) tuple.
    """
    if status is RegistrationStatus.CONFIRMED:
        subject = f"Registration confirmed - {lesson.title}"
        intro = "your registration for the lesson has been confirmed."
        outcome = "Status: CONFIRMED\n\nWe look forward to seeing you!"
    else:
        subject = f"Added to the waitlist - {lesson.title}"
        intro = "your registration was received and you are on the waitlist."
        outcome = "Status: WAITLIST\n\nWe will contact you as soon as a spot opens up."

    body = (
        f"Hello {participant.name},\n\n"
        f"{intro}\n\n"
        f"Lesson details:\n{_lesson_details(lesson)}\n\n"
        f"{outcome}\n\n"
        f"Kind regards,\n{signature}"
    )
    return subject, body


def admin_message_body(
    participant: Participant, lesson: Lesson, status: RegistrationStatus
) -> tuple[str, str]:
    """Build subject and body of the admin notification, including occupancy."""
    subject = f"New registration - {lesson.title}"
    body = (
        "New registration:\n\n"
        "Participant:\n"
        f"- Name: {participant.name}\n"
        f"- Email: {participant.email}\n"
        f"- Phone: {participant.phone}\n"
        f"- Age group: {participant.age_group}\n\n"
        f"Lesson:\n{_lesson_details(lesson)}\n\n"
        f"Status: {status.value}\n"
        f"Occupancy: {lesson.enrolled_count}/{lesson.capacity}"
    )
    return subject, body


class EmailNotifier:
    """Notification sink that sends plain-text e-mails."""

    def __init__(
        self,
        transport: SmtpTransport,
        admin_email: str,
        from_email: str,
        signature: str = DEFAULT_SIGNATURE,
    ) -> None:
        """Initialize the EmailNotifier.

        Args:
            transport: Transport that performs the actual delivery.
            admin_email: Recipient of admin notifications.
            from_email: Sender address.
            signature: Closing line of participant e-mails.
        """
        self.transport = transport
        self.admin_email = admin_email
        self.from_email = from_email
        self.signature = signature

    def _message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_email
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    async def send_participant_confirmation(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        subject, body = participant_message_body(participant, lesson, status, self.signature)
        message = self._message(participant.email, subject, body)
        await asyncio.to_thread(self.transport.send, message)
        logger.info(
            "Sent %s confirmation for lesson %s to %s",
            status.value,
            lesson.id,
            mask_email(participant.email),
        )

    async def send_admin_notification(
        self, participant: Participant, lesson: Lesson, status: RegistrationStatus
    ) -> None:
        subject, body = admin_message_body(participant, lesson, status)
        message = self._message(self.admin_email, subject, body)
        await asyncio.to_thread(self.transport.send, message)
        logger.info("Sent admin notification for lesson %s", lesson.id)
