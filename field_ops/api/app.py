"""
FastAPI application factory for the field ops API
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.settings import AppSettings, default_settings_record, get_app_settings
from ..exceptions import FieldOpsError
from ..services.document_store import DocumentStore, JsonFileBackend
from .routes import (
    catalog,
    customers,
    invoices,
    jobs,
    payments,
    portal,
    quotes,
    reports,
    service_requests,
    settings as settings_routes,
)

logger = logging.getLogger("field_ops.api")


def build_store(settings: AppSettings) -> DocumentStore:
    backend = JsonFileBackend(settings.DATA_FILE)
    store = DocumentStore(backend, default_settings=default_settings_record(settings))
    logger.info(f"Document store opened at {backend.path}", extra={"evt": "store_opened"})
    return store


def _validation_details(exc: RequestValidationError):
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def create_app(settings: Optional[AppSettings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    settings = settings or get_app_settings()
    store = store or build_store(settings)

    app = FastAPI(title="Field Ops", version=__version__)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.info(
            "validation_error",
            extra={"evt": "validation_error", "path": request.url.path, "decision": "reject", "status_code": 400},
        )
        return JSONResponse(status_code=400, content={"error": "validation error", "details": details})

    @app.exception_handler(FieldOpsError)
    async def field_ops_exception_handler(request: Request, exc: FieldOpsError):
        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(
            level,
            exc.message,
            extra={"evt": "request_failed", "path": request.url.path, "error_type": type(exc).__name__,
                   "status_code": exc.status_code},
        )
        content: Dict[str, Any] = {"error": exc.message}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"evt": "unhandled_error", "path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "internal error"})

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True, "service": "field_ops", "version": __version__}

    for router in (
        customers.router,
        catalog.router,
        service_requests.router,
        jobs.router,
        quotes.router,
        invoices.router,
        payments.router,
        settings_routes.router,
        reports.router,
        portal.router,
    ):
        app.include_router(router, prefix="/api")

    return app
