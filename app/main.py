from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import router
from logging_config import configure_logging
from services.errors import QueryError
from services.formatter import format_error, unexpected_error
from services.query import build_default_query_service
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_query_service()
    logger.info(
        "Serving observations",
        extra={"row_count": len(service.table), "strategy": service.engine.strategy},
    )
    try:
        yield
    finally:
        build_default_query_service.cache_clear()


async def handle_query_error(request: Request, exc: QueryError) -> JSONResponse:
    logger.info(
        "Request rejected: %s %s",
        request.method,
        request.url.path,
        extra={"error_kind": type(exc).__name__, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=format_error(exc).model_dump())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"status_code": 500},
    )
    return JSONResponse(status_code=500, content=unexpected_error().model_dump())


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Weather Observation Query Service",
        description="Filtered listings and summary statistics over stored weather observations.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(QueryError, handle_query_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(router)

    static_root = get_settings().static_root_path
    if static_root and Path(static_root).is_dir():
        app.mount("/", StaticFiles(directory=static_root, html=True), name="static")
    return app

app = create_app()
