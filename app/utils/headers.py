from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp
from starlette.responses import Response

UPLOADS_PREFIX = "/uploads"

# No Content-Security-Policy: cross-origin media must stay embeddable.
SECURITY_HEADERS: Dict[str, str] = {
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

def is_upload_path(path: str) -> bool:
    return path == UPLOADS_PREFIX or path.startswith(UPLOADS_PREFIX + "/")

def security_headers_for(path: str) -> Dict[str, str]:
    headers = dict(SECURITY_HEADERS)
    if is_upload_path(path):
        headers["Cross-Origin-Embedder-Policy"] = "unsafe-none"
    return headers

def record_headers(request: Request, headers: Dict[str, str]) -> None:
    """Keep what this request's response will carry, for the /__headers echo."""
    current = getattr(request.state, "response_headers", None) or {}
    request.state.response_headers = {**current, **headers}

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request, call_next):
        headers = security_headers_for(request.url.path)
        record_headers(request, headers)
        resp: Response = await call_next(request)
        for name, value in headers.items():
            resp.headers.setdefault(name, value)
        return resp
