import asyncio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import time
from typing import Callable, Optional

from trends_gateway.adapters.implementations.http_trends import HttpTrendsClient
from trends_gateway.adapters.interfaces.upstream import UpstreamClient
from trends_gateway.api.error_handlers import (
    handle_api_exception,
    handle_rate_limit_exception,
    handle_request_validation_error,
    handle_unexpected_exception,
    handle_upstream_fatal_exception,
)
from trends_gateway.core.config import Settings, get_settings, load_env_file
from trends_gateway.core.exceptions import APIException, RateLimitError, UpstreamFatalError
from trends_gateway.core.logging import configure_logging, get_logger, set_correlation_id
from trends_gateway.services.query_gateway import QueryGateway
from trends_gateway.services.retry_orchestrator import Sleep


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    upstream: Optional[UpstreamClient] = None,
    sleep: Optional[Sleep] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use, defaults to the cached environment settings
        upstream: Upstream client, defaults to an HTTP client for UPSTREAM_URL
        sleep: Coroutine used between retry attempts, defaults to asyncio.sleep

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()
    upstream = upstream or HttpTrendsClient(settings.UPSTREAM_URL, timeout=settings.UPSTREAM_TIMEOUT)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        debug=settings.DEBUG
    )

    app.state.settings = settings
    app.state.gateway = QueryGateway(settings, upstream, sleep=sleep or asyncio.sleep)

    configure_middleware(app, settings)
    handle_exceptions(app)
    register_routers(app, settings)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "Starting up Trends Gateway",
            extra={"data": {
                "allowed_geos": settings.ALLOWED_GEOS,
                "max_attempts": settings.MAX_ATTEMPTS,
                "transient_failure_policy": settings.TRANSIENT_FAILURE_POLICY,
            }}
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Trends Gateway")
        await upstream.close()

    return app


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        start_time = time.time()

        try:
            response = await call_next(request)

            response.headers["X-Correlation-ID"] = correlation_id

            process_time = time.time() - start_time
            logger.info(
                "Request completed",
                extra={"data": {
                    "request_path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "process_time_ms": round(process_time * 1000, 2)
                }}
            )

            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={"data": {
                    "request_path": request.url.path,
                    "method": request.method,
                    "process_time_ms": round(process_time * 1000, 2),
                    "error": str(e)
                }},
                exc_info=True
            )
            raise


def handle_exceptions(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RateLimitError, handle_rate_limit_exception)
    app.add_exception_handler(UpstreamFatalError, handle_upstream_fatal_exception)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)


def register_routers(app: FastAPI, settings: Settings) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    # Import routers here to avoid circular imports
    from trends_gateway.api.routes import diagnostics_router, health_router, trends_router

    app.include_router(health_router, tags=["Health"])
    app.include_router(trends_router, prefix=settings.API_PREFIX, tags=["Trends"])
    app.include_router(diagnostics_router, prefix=settings.API_PREFIX, tags=["Diagnostics"])


app = create_application()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    logger.info(f"Server is running on port {settings.PORT}")
    uvicorn.run("trends_gateway.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
