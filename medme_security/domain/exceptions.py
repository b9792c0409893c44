"""Domain-specific exceptions. Pure domain layer, no infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when an inbound report or query violates domain rules."""


class InvalidAlertTransitionError(DomainError):
    """Raised when an alert lifecycle transition is not allowed."""
