"""
Error handling for the FastAPI application.
Maps domain errors to HTTP responses and catches everything else.
"""

import logging
import traceback
from typing import Any, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import FastAPI, status

from taskhub.application.dto.base_dto import ErrorResponseDTO
from taskhub.config import get_settings
from taskhub.domain.models.base import (
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
)
from taskhub.domain.models.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


# Most specific first
_DOMAIN_STATUS = (
    (UnauthorizedError, status.HTTP_403_FORBIDDEN, "Forbidden"),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation Error"),
    (BusinessRuleViolation, status.HTTP_409_CONFLICT, "Conflict"),
)


def format_domain_error(exc: DomainException) -> Dict[str, Any]:
    """Format a domain exception into the error response structure."""
    status_code, error = status.HTTP_400_BAD_REQUEST, "Bad Request"
    for exc_type, mapped_status, mapped_error in _DOMAIN_STATUS:
        if isinstance(exc, exc_type):
            status_code, error = mapped_status, mapped_error
            break

    field = getattr(exc, "field", None)
    response = ErrorResponseDTO(
        error=error,
        message=exc.message,
        code=exc.code,
        status_code=status_code,
        details={"field": field} if field else None,
    )
    return response.model_dump(mode="json", exclude_none=True)


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    error_response = format_domain_error(exc)
    logger.info(
        f"{request.method} {request.url.path} -> {error_response['status_code']} {exc.code}: {exc.message}"
    )
    return JSONResponse(status_code=error_response["status_code"], content=error_response)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error mapping on an application."""
    app.add_exception_handler(DomainException, domain_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Log the failure and return a generic error response.
        """
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        if isinstance(exc, DomainException):
            error_response = format_domain_error(exc)
        else:
            error_response = ErrorResponseDTO(
                error="Internal Server Error",
                message="An unexpected error occurred",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            ).model_dump(mode="json", exclude_none=True)

        # In development, add more debug information
        if get_settings().debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response["status_code"],
            content=error_response
        )
