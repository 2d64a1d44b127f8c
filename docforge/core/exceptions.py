"""Custom exception hierarchy."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class InvalidRequestError(AppError):
    """Raised when a stage request is missing or has a malformed field."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class PreconditionNotMetError(AppError):
    """Raised when a predecessor artifact required by a stage does not exist."""
    pass


class NotFoundError(AppError):
    """Raised when a record addressed directly by ID does not exist."""
    pass


class StorageError(AppError):
    """Raised when the persistence layer rejects a read or write."""
    pass


class ProviderFailure(AppError):
    """Base class for LLM provider failures.

    These never reach the caller: stages recover from them with a fallback.
    """
    def __init__(self, message: str, provider: Optional[str] = None, original_error: Exception = None):
        super().__init__(message, original_error=original_error)
        self.provider = provider


class ProviderUnavailableError(ProviderFailure):
    """Network, authentication or configuration failure reaching a provider."""
    pass


class ProviderTimeoutError(ProviderFailure):
    """Provider did not answer within the gateway timeout."""
    pass


class ProviderRejectedError(ProviderFailure):
    """Provider answered with a non-2xx status or refused the request."""
    pass


class OutputShapeError(AppError):
    """Raised when model output does not satisfy the stage's output contract."""
    pass
