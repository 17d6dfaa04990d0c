"""Exceptions for the Registration module."""


class RegistrationError(Exception):
    """Base exception for registration errors."""

    pass


class CancellationDeadlineError(RegistrationError):
    """Cancellation attempted at or after midnight of the lesson day."""

    pass


class DuplicateRegistrationError(RegistrationError):
    """Participant already holds an active registration for the lesson."""

    pass
