"""Error types raised by the calorie tracker."""


class CaloriesError(Exception):
    """Base error for recoverable calorie tracker failures."""


class InputValidationError(CaloriesError):
    """User input was rejected before any state was changed."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class LookupUnavailableError(CaloriesError):
    """Nutrition lookup failed or returned no usable energy value."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PersistenceError(CaloriesError):
    """Loading from or saving to durable storage failed."""


class StorePreconditionError(RuntimeError):
    """A caller broke an entry store contract (duplicate or unknown id)."""
