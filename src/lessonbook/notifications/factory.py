"""Choose a notification sink from configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lessonbook.notifications.base import NoOpNotifier, NotificationSink
from lessonbook.notifications.email import EmailNotifier, SmtpTransport

if TYPE_CHECKING:
    from lessonbook.config import Settings

logger = logging.getLogger(__name__)


def create_notifier(settings: Settings) -> NotificationSink:
    """Return an e-mail notifier when SMTP is fully configured, otherwise a no-op sink."""
    if not settings.email_configured:
        logger.warning("E-mail is not configured, notifications are disabled")
        return NoOpNotifier()

    # email_configured guarantees these are set
    assert settings.smtp_host and settings.smtp_user and settings.smtp_pass
    assert settings.admin_email and settings.from_email

    transport = SmtpTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_pass,
    )
    logger.info("E-mail notifications enabled via %s:%d", settings.smtp_host, settings.smtp_port)
    return EmailNotifier(
        transport=transport,
        admin_email=settings.admin_email,
        from_email=settings.from_email,
    )
