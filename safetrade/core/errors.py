"""
Domain exceptions raised by services and repositories.
Routes translate them into HTTPException responses.
"""


class SafeTradeError(Exception):
    """Base class for SafeTrade domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SafeTradeError):
    """Environment is missing or carries unsafe configuration."""


class TokenError(SafeTradeError):
    """JWT could not be decoded, is expired, or has the wrong type."""


class ValidationFailed(SafeTradeError):
    """Business validation rejected the input."""


class NotFoundError(SafeTradeError):
    pass


class ConflictError(SafeTradeError):
    pass


class UploadRejected(SafeTradeError):
    """Evidence file has a forbidden type, is empty or exceeds the size limit."""
