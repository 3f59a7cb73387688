"""Main entry point for the NeoChat relay application."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from neochat_relay.api import messages_router, profiles_router, system_router
from neochat_relay.api.dependencies import get_store
from neochat_relay.core.errors import RelayError
from neochat_relay.core.logging import configure_logging
from neochat_relay.core.settings import Settings, settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _register_exception_handlers(app: FastAPI, config: Settings) -> None:
    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
            message = exc.message if config.expose_internal_errors else INTERNAL_ERROR_MESSAGE
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
            message = exc.message
        return _error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("%s %s rejected: malformed body", request.method, request.url.path)
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        # Unknown path and known path with the wrong method are both "no route".
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return PlainTextResponse(config.banner, status_code=status.HTTP_404_NOT_FOUND)
        return _error_response(exc.status_code, str(exc.detail))


def _register_middleware(app: FastAPI, config: Settings) -> None:
    @app.middleware("http")
    async def cors_and_errors(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Answer preflights, shape uncaught errors and attach CORS headers."""
        if request.method == "OPTIONS":
            response: Response = Response(status_code=status.HTTP_200_OK)
        else:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("%s %s failed", request.method, request.url.path)
                message = str(exc) if config.expose_internal_errors else INTERNAL_ERROR_MESSAGE
                response = _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
        response.headers.update(config.cors_headers)
        return response


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the relay application."""
    config = config or settings

    app = FastAPI(
        title=config.app_name,
        description="Stateless store-and-forward relay for end-to-end encrypted envelopes",
        version=config.app_version,
        debug=config.debug,
        redirect_slashes=False,
    )
    app.state.settings = config

    _register_middleware(app, config)
    _register_exception_handlers(app, config)

    app.include_router(profiles_router)
    app.include_router(messages_router)
    app.include_router(system_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        configure_logging(config.log_level)
        logger.info(
            "%s %s starting (storage=%s, message ttl=%ss)",
            config.app_name,
            config.app_version,
            config.storage_backend,
            config.message_ttl_seconds,
        )

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        if get_store.cache_info().currsize:
            get_store().close()
            get_store.cache_clear()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("neochat_relay.main:app", host=settings.host, port=settings.port, reload=settings.debug)
