from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from document_service import DocumentStoreService
from errors import MethodNotSupportedError

router = APIRouter(tags=["files"])
logger = logging.getLogger(__name__)

FILES_PATH = "/api/files"


def _service(request: Request) -> DocumentStoreService:
    return request.app.state.document_service


async def _read_json_body(request: Request) -> dict[str, Any]:
    """
    Parse the request body as a JSON object.
    A missing, malformed or non-object body reads as {} so validation reports the missing fields.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.info("FILES API: ignoring body that is not valid JSON (%d bytes)", len(raw))
        return {}
    return data if isinstance(data, dict) else {}


@router.get(FILES_PATH)
async def list_files(request: Request) -> JSONResponse:
    files = await _service(request).list_files()
    return JSONResponse({"files": files})


@router.post(FILES_PATH)
async def save_file(request: Request) -> JSONResponse:
    body = await _read_json_body(request)
    filename = await _service(request).put_file(
        body.get("filename"),
        body.get("content"),
        body.get("accessCode"),
    )
    return JSONResponse({"success": True, "filename": filename})


@router.delete(FILES_PATH)
async def delete_file(request: Request) -> JSONResponse:
    body = await _read_json_body(request)
    filename = await _service(request).delete_file(
        request.query_params.get("filename"),
        body.get("accessCode"),
    )
    return JSONResponse({"success": True, "filename": filename})


@router.options(FILES_PATH)
async def preflight() -> Response:
    return Response(status_code=200)


@router.api_route(FILES_PATH, methods=["PUT", "PATCH"], include_in_schema=False)
async def unsupported_method(request: Request) -> JSONResponse:
    logger.info("FILES API: rejected %s %s", request.method, request.url.path)
    raise MethodNotSupportedError()
