"""
app/core/errors.py

Purpose: HTTP exception handlers

- JSON error bodies (ErrorResponse) for API routes
- Webhook routes always answer Twilio with TwiML, even on failure,
  so the sender still gets a reply
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import GroupTextError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse
from app.schemas.webhook import twiml_response
from utils.constants import INTERNAL_ERROR_MESSAGE

logger = get_logger(__name__)


def _is_webhook_request(request: Request) -> bool:
    return request.method == "POST" and request.url.path == f"{settings.API_PREFIX}/webhook"


def _twiml_error() -> Response:
    return Response(content=twiml_response(INTERNAL_ERROR_MESSAGE), media_type="application/xml")


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(GroupTextError)
    async def grouptext_exception_handler(request: Request, exc: GroupTextError):
        logger.warning(f"{exc.code}: {exc.message}")
        if _is_webhook_request(request):
            return _twiml_error()

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.message,
                code=exc.code,
                details=exc.details
            ).model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code="HTTP_ERROR",
                details=None
            ).model_dump()
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Malformed webhook form posts still get a TwiML apology.
        """
        if _is_webhook_request(request):
            logger.warning(f"Malformed webhook payload: {exc.errors()}")
            return _twiml_error()

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error="Input validation failed",
                code="VALIDATION_ERROR",
                details=exc.errors()
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        if _is_webhook_request(request):
            return _twiml_error()

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=message,
                code="INTERNAL_ERROR",
                details=None
            ).model_dump()
        )
