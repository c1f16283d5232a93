"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from signage.adapters.rate_limit import RateLimiter
from signage.core.config import get_settings
from signage.core.logging_safety import configure_logging, safe_log_identifier
from signage.errors import ApiError, InternalError
from signage.pipeline.endpoint import request_correlation_id
from signage.pipeline.responses import error_response
from signage.repositories.memory import InMemoryStore
from signage.routes import auth_router, login_router, slides_router

logger = logging.getLogger(__name__)


def create_app(store: InMemoryStore | None = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Signage API", version="1.0.0")
    app.state.store = store if store is not None else InMemoryStore()
    app.state.rate_limiter = RateLimiter(
        settings.rate_limit_storage_uri,
        timeout_seconds=settings.rate_limit_timeout_seconds,
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "app.internal_error correlation_id=%s method=%s path=%s error=%s",
            safe_log_identifier(request_correlation_id(request), prefix="cid"),
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        return error_response(InternalError())

    api_prefix = "/api/endpoint"
    app.include_router(slides_router, prefix=api_prefix)
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(login_router)

    return app


app = create_app()
