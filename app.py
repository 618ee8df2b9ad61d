from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = ["GET", "OPTIONS", "POST", "DELETE"]
CORS_ALLOW_HEADERS = [
    "X-CSRF-Token",
    "X-Requested-With",
    "Accept",
    "Accept-Version",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "X-Api-Version",
]


def build_store(settings):
    from persistence.disk_store import DiskKeyValueStore
    from persistence.memory_store import InMemoryKeyValueStore
    from persistence.rest_store import RestKeyValueStore

    if settings.kv_backend == "disk":
        return DiskKeyValueStore(settings.data_dir)
    if settings.kv_backend == "rest":
        return RestKeyValueStore(settings.kv_rest_api_url, settings.kv_rest_api_token)
    return InMemoryKeyValueStore()


def create_app(settings=None, store=None) -> FastAPI:
    load_dotenv("local.env")

    from document_service import DocumentStoreService
    from endpoints.files_endpoints import router as files_router
    from errors import DocumentStoreError
    from logging_setup import configure_logging
    from persistence.repositories import AsyncKeyValueFileRepository
    from settings import get_settings

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = store if store is not None else build_store(settings)
    repo = AsyncKeyValueFileRepository(store, serialize_mutations=settings.serialize_mutations)

    app = FastAPI(title="shared-docs")
    app.state.settings = settings
    app.state.store = store
    app.state.document_service = DocumentStoreService(repo, settings.access_code)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    if settings.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            logger.info(
                "REQUEST: %s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response

    @app.exception_handler(DocumentStoreError)
    async def document_store_error(request: Request, exc: DocumentStoreError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
        return JSONResponse({"error": message}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    app.include_router(files_router)

    logger.info(
        "APP: kv_backend=%s serialize_mutations=%s writes_enabled=%s",
        settings.kv_backend,
        settings.serialize_mutations,
        bool(settings.access_code),
    )
    return app


app = create_app()
