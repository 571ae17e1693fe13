"""
Service errors and the single mapping from errors to HTTP responses.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailure(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(ServiceError):
    pass


def error_response(exc: Exception) -> JSONResponse:
    """
    Map an exception to a JSON error response.

    ServiceError subclasses carry their own status. Unique/foreign-key
    violations become 409, any other database failure a 500.
    """
    if isinstance(exc, ServiceError):
        error = exc
    elif isinstance(exc, IntegrityError):
        error = Conflict()
    elif isinstance(exc, SQLAlchemyError):
        logger.error("Database error: %s", exc, exc_info=exc)
        error = InternalError()
    else:
        logger.error("Unhandled error: %s", exc, exc_info=exc)
        error = InternalError()

    headers = None
    if isinstance(error, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message},
        headers=headers,
    )


async def service_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(exc)


def register_error_handlers(app) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, service_error_handler)
    app.add_exception_handler(Exception, service_error_handler)
