"""Project-wide custom exception types."""


class DataUnavailableError(RuntimeError):
    """Raised when the survey endpoint cannot supply a usable JSON array."""

    def __init__(self, message: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)
