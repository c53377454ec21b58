from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api_clients.base import HospitalProvider
from .api_clients.carirs import build_provider
from .cache import CacheProvider
from .config import Settings, get_settings
from .errors import GENERIC_ERROR_BODY, NOT_FOUND_BODY, ApiError
from .logging_config import logger, setup_logging
from .routes import lookup, meta


def create_app(
    settings: Settings | None = None,
    provider: HospitalProvider | None = None,
    cache: CacheProvider | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.settings = settings
        app.state.provider = provider or build_provider(settings)
        app.state.cache = cache or CacheProvider.from_settings(settings)
        await app.state.cache.init()
        logger.info(
            "app.start",
            port=settings.port,
            cache_backend=app.state.cache.backend,
            provider=getattr(app.state.provider, "name", type(app.state.provider).__name__),
        )
        try:
            yield
        finally:
            await app.state.provider.close()
            await app.state.cache.close()
            logger.info("app.stop")

    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status, content=exc.render_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content=dict(NOT_FOUND_BODY))
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content=dict(GENERIC_ERROR_BODY))

    app.include_router(meta.router)
    app.include_router(lookup.router)
    return app


app = create_app()
