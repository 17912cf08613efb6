"""Project-wide custom exception types."""


class InvalidFilterError(ValueError):
    """Raised when an aggregation filter is built with an unusable year or month."""

    def __init__(self, message: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)


class PayloadError(ValueError):
    """Raised when a survey export cannot be read or decoded."""
