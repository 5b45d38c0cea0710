"""
api/main.py -- FastAPI application entry point for Turnstile.

Exposes the auth core over HTTP. Routing, body parsing and the wire format
live in api/; every decision about credentials lives in auth/.

Run with:      python main.py
               uvicorn api.main:app --reload

Lifespan creates one AuthService (and with it one empty CredentialStore) per
application run and tears it down on shutdown. Nothing is persisted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse, MessageResponse
from api.routes.auth import router as auth_router
from auth.service import AuthService
from core.config import get_settings

API_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=get_settings().effective_log_level,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("turnstile.api")


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the AuthService for the full server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown. The store is created empty here rather than at import time so
    every application run (and every TestClient) starts from a clean slate.
    """
    # Startup
    settings = get_settings()
    logger.info("Turnstile API starting up")
    app.state.auth_service = AuthService(rounds=settings.bcrypt_rounds)
    logger.info(
        "Auth initialized (bcrypt_rounds=%d, conflict_status_code=%d)",
        settings.bcrypt_rounds,
        settings.conflict_status_code,
    )

    yield

    # Shutdown
    discarded = len(app.state.auth_service.store)
    logger.info("Turnstile API shutdown complete (%d in-memory credential(s) discarded)", discarded)


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Turnstile API",
    description="Minimal user registration and username/password authentication.",
    version=API_VERSION,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time is captured before and after call_next so latency
# is reported on every response.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Registered on Starlette's HTTPException (FastAPI's subclasses it) so that
# routing misses, which Starlette raises itself, are handled here too.
# ---------------------------------------------------------------------------


def _original_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return {code, message} for HTTP errors.

    A known path hit with the wrong method (405) has no handler either, so it
    is reported as a 404 like any other unmatched route.
    """
    if exc.status_code in (404, 405):
        body = MessageResponse(code=404, message=f"Not found - {_original_url(request)}")
        return JSONResponse(status_code=404, content=body.model_dump())
    body = MessageResponse(code=exc.status_code, message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The traceback goes to the log only. The client receives the exception's
    message string and nothing else.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=MessageResponse(code=500, message=str(exc)).model_dump())


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state.
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=API_VERSION)
