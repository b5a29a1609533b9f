from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from trends_gateway.core.exceptions import (
    APIException,
    RateLimitError,
    UpstreamFatalError,
)
from trends_gateway.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(
        f"API Exception: {exc.detail}",
        extra={"data": {
            "status_code": exc.status_code,
            "error_code": exc.code,
            "context": exc.context
        }}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_rate_limit_exception(request: Request, exc: RateLimitError) -> JSONResponse:
    """
    Handle surfaced upstream rate limits.

    Adds a Retry-After header so callers can schedule their own backoff.
    """
    logger.warning(
        f"Rate limit surfaced: {exc.detail}",
        extra={"data": {"retry_after": exc.retry_after, "context": exc.context}}
    )

    headers = {}
    if exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers
    )


async def handle_upstream_fatal_exception(request: Request, exc: UpstreamFatalError) -> JSONResponse:
    """
    Handle fatal upstream failures.

    Args:
        request: FastAPI request object
        exc: UpstreamFatalError instance

    Returns:
        JSONResponse: Formatted upstream error response
    """
    logger.error(
        f"Upstream error: {exc.detail}",
        extra={"data": {
            "original_error": exc.context.get("original_error") if exc.context else None,
            "context": exc.context
        }}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        errors.append({
            "loc": error["loc"],
            "msg": error["msg"],
            "type": error["type"]
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "validation_error",
                "message": "Request validation error",
                "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                "context": {
                    "errors": errors
                }
            }
        }
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
            }
        }
    )
