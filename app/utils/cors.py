from typing import Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from app.utils.errors import CorsDeniedError, http_error_response
from app.utils.headers import is_upload_path, record_headers
from app.utils.logging import logger
from app.utils.origin_guard import (
    CorsDecision,
    allow_origin_headers,
    decide,
    preflight_headers,
)


class DynamicCORSMiddleware(BaseHTTPMiddleware):
    """
    Allow-list CORS for everything except /uploads (the asset server sets its
    own headers).

    deny -> 403 envelope, stop; preflight -> empty 200, stop; otherwise the
    request continues and the echoed origin is added to the response.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Sequence[str], max_age: int = 600):
        super().__init__(app)
        self.allowed_origins = tuple(allowed_origins)
        self.max_age = max_age

    async def dispatch(self, request, call_next):
        if is_upload_path(request.url.path):
            return await call_next(request)

        origin = request.headers.get("origin")
        if decide(origin, self.allowed_origins) is CorsDecision.DENY:
            logger.warning(f"CORS blocked for origin: {origin}")
            return http_error_response(CorsDeniedError())

        if request.method == "OPTIONS":
            return Response(status_code=200, headers=preflight_headers(origin, self.max_age))

        headers = allow_origin_headers(origin)
        record_headers(request, headers)
        resp: Response = await call_next(request)
        for name, value in headers.items():
            if name == "Vary":
                resp.headers.add_vary_header(value)
            else:
                resp.headers[name] = value
        return resp
