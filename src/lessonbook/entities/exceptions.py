"""Exceptions for entity construction."""


class ValidationError(Exception):
    """Input failed validation. Nothing was created.

    Attributes:
        field: Name of the offending input field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message
