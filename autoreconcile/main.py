"""AutoReconcile - FastAPI application."""

import time
import traceback
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from autoreconcile import __version__
from autoreconcile.config import settings
from autoreconcile.logger import bind_request_context, configure_logging, current_request_id, get_logger
from autoreconcile.routers import ledger, reconciliation, statements
from autoreconcile.services.session import ReconciliationSession

REQUEST_ID_HEADER = "X-Request-ID"
GENERIC_ERROR_DETAIL = "An internal server error occurred. Please try again later."

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.session = ReconciliationSession()
    logger.info(
        "AutoReconcile started",
        version=__version__,
        environment=settings.environment,
        extraction_enabled=bool(settings.openrouter_api_key),
    )
    yield
    logger.info("AutoReconcile stopped")


async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Tag every log line of a request with its id and log the outcome."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    bind_request_context(request_id, request.method, request.url.path)

    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception(
            "Request failed",
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            error=str(exc),
        )
        raise

    logger.info(
        "Request completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """JSON 500 body; the exception text and traceback are exposed only in debug mode."""
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.debug else GENERIC_ERROR_DETAIL,
            "trace": traceback.format_exc() if settings.debug else None,
            "request_id": current_request_id(),
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="AutoReconcile API",
        description="Reconciles ledger account balances against bank statements",
        version=__version__,
        lifespan=lifespan,
    )
    # Set here as well so transports that skip the lifespan still get a session
    app.state.session = ReconciliationSession()

    app.middleware("http")(log_requests)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
    )

    app.include_router(ledger.router)
    app.include_router(statements.router)
    app.include_router(reconciliation.router)

    @app.get("/health")
    async def health_check() -> dict[str, str | bool]:
        return {
            "status": "healthy",
            "version": __version__,
            "extraction_enabled": bool(settings.openrouter_api_key),
        }

    return app


app = create_app()
