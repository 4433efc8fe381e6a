import traceback

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded

from app.utils.logging import logger
from app.utils.response import error, error_body

# Custom semantic errors
class CorsDeniedError(HTTPException):
    def __init__(self, detail="Not allowed by CORS"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class NotFoundError(HTTPException):
    def __init__(self, detail="Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class BadRequestError(HTTPException):
    def __init__(self, detail="Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

def http_error_response(exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    # Router-level miss (no route matched at all)
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = "Route not found"
    return error(str(detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))

# ---- Exception handlers (registered in create_app) ----
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"HTTPException {exc.status_code}: {exc.detail}")
    else:
        logger.warning(f"HTTPException {exc.status_code}: {exc.detail}")
    return http_error_response(exc)

async def handle_validation_error(request: Request, exc: RequestValidationError | ValidationError):
    logger.warning("ValidationError")
    return error(
        "validation_error",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details=jsonable_errors(exc),
    )

async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    return error("rate_limited", status_code=status.HTTP_429_TOO_MANY_REQUESTS)

async def handle_unhandled(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {type(exc).__name__}", exc_info=True)
    settings = request.app.state.settings
    message = "Internal server error"
    if settings.EXPOSE_ERROR_DETAILS or settings.is_development:
        message = str(exc) or message
    stack = traceback.format_exception(exc) if settings.is_development else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message, stack=stack),
    )

def jsonable_errors(exc: RequestValidationError | ValidationError) -> list:
    # ctx may carry exception instances that JSON can't encode
    out = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        out.append(err)
    return out
