"""Custom exceptions for the take-home pay planner."""


class TaxComputationError(Exception):
    """Base exception for tax computation errors."""


class InvalidInputError(TaxComputationError):
    """Raised when an engine input violates a documented precondition."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid input '{field}': {message}")


class UnsupportedPayPeriodError(InvalidInputError):
    """Raised when a pay period has no day length for the remaining-periods estimate."""

    def __init__(self, period: str):
        self.period = period
        super().__init__("frequency", f"no pay period length defined for '{period}'")


class TablesLoadError(TaxComputationError):
    """Raised when a rate table file cannot be read or validated."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"Could not load tax tables from {file_path}: {message}")
