from __future__ import annotations

import json

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import FilterValidationError, LogFeedError
from .gateway_client import get_gateway_client
from .logging_config import configure_logging, logger
from .routes import api_router
from .services import get_log_feed
from .utils import error_response, feed_error_response


# Register global exception handlers for consistent error responses across the API
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.debug("validation error", extra={"errors": exc.errors(), "path": str(request.url)})
        return error_response(
            "Invalid request",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(FilterValidationError)
    async def _filter_exception_handler(request: Request, exc: FilterValidationError):
        logger.debug("filter rejected", extra={"error": str(exc), "path": str(request.url)})
        return feed_error_response(exc, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)

    @app.exception_handler(LogFeedError)
    async def _feed_exception_handler(request: Request, exc: LogFeedError):
        logger.warning("log feed error", extra={"error": str(exc), "kind": exc.kind, "path": str(request.url)})
        return feed_error_response(exc, status_code=status.HTTP_502_BAD_GATEWAY)

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):
        logger.debug(
            "http error",
            extra={"detail": exc.detail, "status": exc.status_code, "path": str(request.url)},
        )
        detail = exc.detail
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        return JSONResponse({"ok": False, "error": detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": str(request.url)})
        return JSONResponse(
            {"ok": False, "error": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


configure_logging()
_settings = get_settings()

app = FastAPI(
    title=_settings.app_name,
    version=_settings.app_version,
    docs_url=_settings.resolved_docs_url,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)


@app.on_event("startup")
# Start polling the newest request logs when the app starts
async def _start_log_feed() -> None:
    feed = get_log_feed()
    await feed.start()


@app.on_event("shutdown")
# Stop the head poller and release the gateway connection pool
async def _stop_log_feed() -> None:
    feed = get_log_feed()
    await feed.stop()
    await get_gateway_client().close()


__all__ = ["app"]
