from fastapi import HTTPException

from barberbook.services.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    SlotUnavailableError,
    ValidationFailedError,
)

_STATUS_CODES = (
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (ValidationFailedError, 422),
    (SlotUnavailableError, 409),
)


def to_http_exception(exc: ServiceError) -> HTTPException:
    """Map a service failure onto the HTTP status the client should see."""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))
