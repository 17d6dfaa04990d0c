"""Exceptions raised by the API layer."""


class OperationFailedError(Exception):
    """An admin or self-service operation reported an expected failure."""

    def __init__(self, error: str) -> None:
        super().__init__(error)
        self.error = error
