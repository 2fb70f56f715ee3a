"""Application error types."""


class MealPlannerError(Exception):
    """Base error for the meal planner."""


class StoreError(MealPlannerError):
    """Raised when a read or write against the data store fails."""

    def __init__(self, action: str, message: str | None = None) -> None:
        self.action = action
        super().__init__(message or f"Data store failure during {action}")


class NotFoundError(MealPlannerError):
    """Raised when a requested row does not exist for the user."""


class ValidationError(MealPlannerError):
    """Raised when user input fails validation."""


class InvalidCriteriaError(ValidationError):
    """Raised when an achievement criteria blob cannot be interpreted."""


class InvalidBarcodeError(ValidationError):
    """Raised when a manually entered barcode is malformed."""


class UpstreamServiceError(MealPlannerError):
    """Raised when a third-party API call fails."""

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service}: {message}")
