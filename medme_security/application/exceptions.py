"""Application-layer exceptions. Do not reuse domain exceptions."""

from typing import Any, Optional


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreUnavailableError(ApplicationError):
    """Raised when a read or write against the audit store fails or times out."""


class ReportNotRecordedError(StoreUnavailableError):
    """Raised when a report was classified but its audit record could not be written."""

    def __init__(self, message: str, outcome: Optional[Any] = None) -> None:
        self.outcome = outcome
        super().__init__(message)


class AlertNotFoundError(ApplicationError):
    """Raised when acknowledge / resolve references an unknown or non-alert record."""


class AlertConflictError(ApplicationError):
    """Raised when an alert changed between read and compare-and-swap write."""


class NotificationError(ApplicationError):
    """Raised by alert notifiers when the outbound sink rejects or fails a delivery."""
