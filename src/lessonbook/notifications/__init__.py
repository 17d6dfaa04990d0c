"""Registration notifications: sinks, the e-mail implementation and background dispatch."""

from lessonbook.notifications.base import NoOpNotifier, NotificationSink
from lessonbook.notifications.dispatcher import NotificationDispatcher
from lessonbook.notifications.email import (
    EmailNotifier,
    SmtpTransport,
    admin_message_body,
    participant_message_body,
)
from lessonbook.notifications.factory import create_notifier

__all__ = [
    "EmailNotifier",
    "NoOpNotifier",
    "NotificationDispatcher",
    "NotificationSink",
    "SmtpTransport",
    "admin_message_body",
    "create_notifier",
    "participant_message_body",
]
