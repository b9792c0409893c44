"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(SecurityError):
    """Raised when a protected operation has no authenticated actor."""


class AuthorizationError(SecurityError):
    """Raised when the actor's role lacks the capability for the operation."""
