"""
HTTP status mapping for domain and application errors.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..domain.errors import ConflictError, DomainError, NotFoundError, ValidationError
from .utils.responses import fail

INTERNAL_ERROR_MESSAGE = "An unexpected error has occurred. Please try again later."


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def domain_error_response(request: Request, error: DomainError) -> JSONResponse:
    return fail(
        request,
        error=error.error_code or "DOMAIN_ERROR",
        message=error.message,
        details=error.details,
        status_code=status_for(error),
    )


def internal_error_response(request: Request) -> JSONResponse:
    return fail(
        request,
        error="INTERNAL_ERROR",
        message=INTERNAL_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
