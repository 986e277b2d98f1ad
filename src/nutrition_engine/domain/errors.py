"""Domain errors raised by the engine."""


class InvalidArgumentError(ValueError):
    """Raised when an operation receives missing or malformed input."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or []


class MealHistoryUnavailableError(RuntimeError):
    """Raised when the meal history backend cannot serve a query."""
