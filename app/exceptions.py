"""Domain errors raised by UserHub services."""


class UserHubError(Exception):
    """Base class for all service-level errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class NotFound(UserHubError):
    """No user matches the lookup."""


class InvalidCredentials(UserHubError):
    """Password mismatch or account not allowed to sign in."""


class InvalidToken(UserHubError):
    """Token failed verification or no longer matches the stored session."""


class TokenExpired(InvalidToken):
    """Token signature is valid but its expiry has passed."""


class TokenSignatureInvalid(InvalidToken):
    """Token is malformed, tampered with, or of the wrong type."""


class InvalidInput(UserHubError):
    """Input rejected before reaching storage or hashing."""


class ConfigurationError(InvalidInput):
    """Required configuration is missing."""


class Conflict(UserHubError):
    """Unique constraint would be violated (e.g. email already registered)."""
