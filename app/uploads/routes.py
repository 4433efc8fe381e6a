# app/uploads/routes.py
# GET/HEAD/OPTIONS /uploads/{path} with byte-range support for media seeking.
from typing import Dict, Optional, Sequence

from fastapi import APIRouter, Request
from fastapi.responses import Response, StreamingResponse
from starlette.concurrency import run_in_threadpool

from app.uploads.ranges import RangeNotSatisfiable, parse_range, unsatisfied_range
from app.uploads.storage import iter_file, stat_asset
from app.utils.headers import UPLOADS_PREFIX
from app.utils.origin_guard import is_allowed_origin
from app.utils.response import error

router = APIRouter(prefix=UPLOADS_PREFIX, include_in_schema=False)

CACHE_CONTROL = "public, max-age=3600"
ALLOWED_METHODS = ("GET", "HEAD", "OPTIONS")


def asset_headers(origin: Optional[str], allowed_origins: Sequence[str]) -> Dict[str, str]:
    headers = {
        "Access-Control-Allow-Methods": "GET,HEAD,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Range, Authorization",
        "Access-Control-Expose-Headers": "Content-Length, Content-Range, Accept-Ranges",
        "Access-Control-Allow-Credentials": "true",
        "Cross-Origin-Resource-Policy": "cross-origin",
        "Cross-Origin-Embedder-Policy": "unsafe-none",
        "Accept-Ranges": "bytes",
        "Cache-Control": CACHE_CONTROL,
    }
    # Echo only an accepted origin; with no Origin the header is left out.
    if is_allowed_origin(origin, allowed_origins):
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


# Every method lands here so a 405 still carries the asset headers.
@router.api_route(
    "/{asset_path:path}",
    methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
)
async def serve_upload(request: Request, asset_path: str):
    headers = asset_headers(request.headers.get("origin"), request.app.state.allowed_origins)

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)

    if request.method not in ALLOWED_METHODS:
        headers["Allow"] = ", ".join(ALLOWED_METHODS)
        return error("Method not allowed", status_code=405, headers=headers)

    info = await run_in_threadpool(stat_asset, request.app.state.upload_root, asset_path)
    if info is None:
        return error("File not found", status_code=404, headers=headers)

    headers["Last-Modified"] = info.last_modified
    headers["ETag"] = info.etag

    if_none_match = request.headers.get("if-none-match")
    if if_none_match and (if_none_match.strip() == "*" or info.etag in [t.strip() for t in if_none_match.split(",")]):
        return Response(status_code=304, headers=headers)

    try:
        byte_range = parse_range(request.headers.get("range"), info.size)
    except RangeNotSatisfiable:
        headers["Content-Range"] = unsatisfied_range(info.size)
        return error("Range not satisfiable", status_code=416, headers=headers)

    if byte_range is None:
        status_code, start, length = 200, 0, info.size
    else:
        status_code, start, length = 206, byte_range.start, byte_range.length
        headers["Content-Range"] = byte_range.content_range(info.size)

    headers["Content-Length"] = str(length)
    headers["Content-Type"] = info.media_type

    if request.method == "HEAD":
        return Response(status_code=status_code, headers=headers)
    return StreamingResponse(
        iter_file(info.path, start, length),
        status_code=status_code,
        headers=headers,
        media_type=info.media_type,
    )
