"""
Exception handlers for the FastAPI application.

Every failure leaves the service as a StandardErrorResponse body, and every
error body sent is counted by its error code for the /health report.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Dict, Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import ModifierExtractorException, ErrorCode
from app.models.api_models import StandardErrorResponse

logger = logging.getLogger(__name__)

HTTP_STATUS_ERROR_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    413: ErrorCode.IMAGE_TOO_LARGE,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


class ErrorHandler:
    """Turns exceptions into error envelopes and counts them per error code."""

    def __init__(self):
        self.error_counts: Counter = Counter()

    async def handle_extractor_exception(
        self,
        request: Request,
        exc: ModifierExtractorException
    ) -> JSONResponse:
        """
        Handle application exceptions.

        Client errors are logged as warnings, collaborator and server
        failures as errors.
        """
        request_id = _request_id(request)

        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"{type(exc).__name__} in request {request_id}: {exc.message}",
            extra={
                'request_id': request_id,
                'error_code': exc.error_code.value,
                'status_code': exc.status_code,
                'details': exc.details,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )

        return self.error_response(
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
            request_id=request_id,
            status_code=exc.status_code
        )

    async def handle_validation_error(
        self,
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Report each invalid field of a request body or form."""
        request_id = _request_id(request)

        validation_errors = [
            {
                'field': '.'.join(str(loc) for loc in error['loc']),
                'message': error['msg'],
                'type': error['type'],
            }
            for error in exc.errors()
        ]

        logger.warning(
            f"Validation error in request {request_id}: {len(validation_errors)} field errors",
            extra={
                'request_id': request_id,
                'validation_errors': validation_errors,
                'request_path': request.url.path
            }
        )

        return self.error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            details={'validation_errors': validation_errors},
            request_id=request_id,
            status_code=422
        )

    async def handle_http_exception(
        self,
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        request_id = _request_id(request)
        error_code = HTTP_STATUS_ERROR_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)

        logger.warning(
            f"HTTP exception in request {request_id}: {exc.status_code} - {exc.detail}",
            extra={
                'request_id': request_id,
                'status_code': exc.status_code,
                'request_path': request.url.path
            }
        )

        return self.error_response(
            error_code=error_code,
            message=str(exc.detail),
            request_id=request_id,
            status_code=exc.status_code
        )

    async def handle_generic_exception(
        self,
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Unexpected exceptions are logged with a traceback and hidden from the caller."""
        request_id = _request_id(request)

        logger.error(
            f"Unhandled exception in request {request_id}: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                'request_id': request_id,
                'exception_type': type(exc).__name__,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )

        return self.error_response(
            error_code=ErrorCode.INTERNAL_SERVER_ERROR,
            message="An internal server error occurred",
            request_id=request_id,
            status_code=500
        )

    def error_response(
        self,
        error_code: ErrorCode,
        message: str,
        request_id: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None
    ) -> JSONResponse:
        """Build the error envelope and count it under its error code."""
        self.error_counts[error_code.value] += 1

        body = StandardErrorResponse(
            error_code=error_code.value,
            message=message,
            details=details or None,
            request_id=request_id,
            timestamp=datetime.utcnow()
        )

        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(mode="json")
        )

    def get_error_statistics(self) -> Dict[str, Any]:
        """Error responses sent since startup, per error code and in total."""
        return {
            'error_counts': dict(self.error_counts),
            'total_errors': sum(self.error_counts.values()),
        }


# Global error handler instance
error_handler = ErrorHandler()


def setup_error_handlers(app):
    """Register the error envelope handlers on a FastAPI application."""

    @app.exception_handler(ModifierExtractorException)
    async def extractor_exception_handler(request: Request, exc: ModifierExtractorException):
        return await error_handler.handle_extractor_exception(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await error_handler.handle_validation_error(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return await error_handler.handle_http_exception(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return await error_handler.handle_generic_exception(request, exc)
