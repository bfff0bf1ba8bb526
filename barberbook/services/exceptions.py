class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the data store returns an error response or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class NotFoundError(ServiceError):
    """Raised when a tenant, record or membership does not exist."""


class PermissionDeniedError(ServiceError):
    """Raised when the caller's role does not allow the operation."""


class ValidationFailedError(ServiceError):
    """Raised when a write is rejected by business validation."""


class SlotUnavailableError(ServiceError):
    """Raised when the chosen time is no longer bookable at write time."""
