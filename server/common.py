"""Wiring shared by the wardrobe and ticketing FastAPI apps."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitlockr_app.client_log import ClientLogWriter
from fitlockr_app.config import AppConfig
from fitlockr_app.logging_config import correlation_context, get_logger, log_event
from logic.validation import validation_message
from tools.image_host import ImageHost, ImageHostNotConfiguredError, ImageUploadError
from tools.product_page_fetcher import ProductPageFetchError

LOGGER = get_logger(__name__)
REQUEST_ID_HEADER = "X-Request-ID"


def get_store(request: Request) -> Any:
    """Return the service's store (``WardrobeStore`` or ``TicketingStore``)."""

    return request.app.state.store


def get_image_host(request: Request) -> ImageHost:
    return request.app.state.image_host


def get_client_log(request: Request) -> ClientLogWriter:
    return request.app.state.client_log


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    """Translate leftover domain errors into ``{"detail": ...}`` responses."""

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, validation_message(exc.errors()))

    @app.exception_handler(ValueError)
    async def _value_error(request: Request, exc: ValueError) -> JSONResponse:
        log_event(LOGGER, logging.INFO, "request_rejected", path=request.url.path, reason=str(exc))
        return _error(400, str(exc))

    @app.exception_handler(ImageHostNotConfiguredError)
    async def _image_host_missing(request: Request, exc: ImageHostNotConfiguredError) -> JSONResponse:
        return _error(503, str(exc))

    @app.exception_handler(ImageUploadError)
    async def _image_upload(request: Request, exc: ImageUploadError) -> JSONResponse:
        return _error(502, str(exc))

    @app.exception_handler(ProductPageFetchError)
    async def _fetch_failed(request: Request, exc: ProductPageFetchError) -> JSONResponse:
        return _error(502, "Failed to fetch product page")


def register_correlation_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def _correlate(request: Request, call_next):
        with correlation_context(request.headers.get(REQUEST_ID_HEADER)) as correlation_id:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = correlation_id
            log_event(
                LOGGER,
                logging.INFO,
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            return response


def build_service_router() -> APIRouter:
    """Routes both services expose: the client log sink and the health probe."""

    router = APIRouter()

    @router.post("/api/logs")
    def write_client_log(
        entry: Dict[str, Any] = Body(...),
        writer: ClientLogWriter = Depends(get_client_log),
    ) -> dict:
        writer.write(entry)
        return {"success": True}

    @router.get("/api/health")
    def healthcheck() -> dict:
        return {"ok": True}

    return router


def install_common(app: FastAPI, config: AppConfig) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_correlation_middleware(app)
    register_error_handlers(app)
    app.include_router(build_service_router())


__all__ = [
    "REQUEST_ID_HEADER",
    "build_service_router",
    "get_client_log",
    "get_image_host",
    "get_store",
    "install_common",
    "register_correlation_middleware",
    "register_error_handlers",
]
