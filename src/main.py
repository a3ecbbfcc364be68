"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.lg_cache.application.runtime import build_cache_runtime
from src.lg_common.database import async_session_factory, engine
from src.lg_common.errors import AppError, InvalidEntityFieldsError
from src.lg_common.logging_config import configure_logging
from src.lg_common.response import error_response, success_response
from src.lg_gateway.middleware.request_log import RequestLogMiddleware
from src.lg_league.api.router import routers as league_routers
from src.lg_league.infrastructure.persistence import DocumentRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, build the cache runtime. Shutdown: close both."""
    configure_logging(settings.LOG_LEVEL)
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    runtime = build_cache_runtime(settings)
    if not await runtime.store.ping():
        # fail-open: serve from the database until the cache comes back
        logger.warning("Cache store unreachable at startup backend=%s", settings.CACHE_BACKEND)
    app.state.cache_runtime = runtime
    app.state.document_repository = DocumentRepository()
    app.state.session_factory = async_session_factory
    yield
    await runtime.close()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, getattr(request.state, "request_id", None))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    locations = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
    return await app_error_handler(request, InvalidEntityFieldsError(locations))


for league_router in league_routers:
    app.include_router(league_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}


@app.get("/health/cache")
async def cache_health(request: Request) -> JSONResponse:
    data = await request.app.state.cache_runtime.health()
    resp = success_response(data, getattr(request.state, "request_id", None))
    status = 200 if data["reachable"] or not data["enabled"] else 503
    return JSONResponse(status_code=status, content=resp.model_dump())
