"""Exceptions for participant intake."""


class IntakeError(Exception):
    """The uploaded spreadsheet could not be read."""

    pass
