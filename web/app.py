from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docdrop.errors import DocDropError, NotFoundError
from docdrop.identity import KeyGenerator
from docdrop.logging import configure_logging
from docdrop.settings import settings
from docdrop.storage.base import StorageBackend
from docdrop.storage.factory import get_storage
from docdrop.urls import RequestContext, UrlStrategy, get_url_strategy
from web.routes.files import router as files_router

configure_logging()
logger = logging.getLogger(__name__)


def create_app(
    storage: StorageBackend | None = None,
    url_strategy: UrlStrategy | None = None,
) -> FastAPI:
    """Build the app. Backend and URL strategy come from settings unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Configuration errors raise here and abort startup.
        app.state.storage = storage or get_storage()
        app.state.url_strategy = url_strategy or get_url_strategy()
        app.state.key_generator = KeyGenerator()
        base_url = app.state.url_strategy.resolve(
            RequestContext(scheme="http", host=f"{settings.host}:{settings.port}")
        )
        logger.info(
            "Server running at %s (storage=%s, urls=%s)",
            base_url,
            app.state.storage.name,
            app.state.url_strategy.kind.value,
        )
        yield

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(files_router)

    @app.exception_handler(DocDropError)
    async def docdrop_exception_handler(request: Request, exc: DocDropError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.__cause__ or exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.code)
        return JSONResponse({"error": exc.message, "code": exc.code}, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            logger.warning("%s %s: no such route", request.method, request.url.path)
            return JSONResponse({"error": NotFoundError.default_message, "code": NotFoundError.code}, status_code=404)
        return JSONResponse(
            {"error": str(exc.detail), "code": f"http_{exc.status_code}"},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s:\n%s",
            request.method,
            request.url.path,
            traceback.format_exc(),
        )
        return JSONResponse({"error": "Internal Server Error", "code": "internal_error"}, status_code=500)

    return app


app = create_app()
