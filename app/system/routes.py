from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["system"])


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/", summary="Service identity")
async def root(request: Request):
    return {
        "success": True,
        "service": request.app.state.settings.APP_NAME,
        "message": "API is running",
        "timestamp": utc_now_iso(),
    }


@router.get("/health", summary="Health check")
async def health():
    return {"status": "ok", "timestamp": utc_now_iso()}


# Registered by create_app only when ENABLE_HEADER_DEBUG is on.
debug_router = APIRouter(include_in_schema=False)


@debug_router.get("/__headers")
async def echo_headers(request: Request):
    decided = getattr(request.state, "response_headers", None) or {}
    return {
        "Access-Control-Allow-Origin": decided.get("Access-Control-Allow-Origin"),
        "Cross-Origin-Resource-Policy": decided.get("Cross-Origin-Resource-Policy"),
        "Cross-Origin-Embedder-Policy": decided.get("Cross-Origin-Embedder-Policy"),
        "Cross-Origin-Opener-Policy": decided.get("Cross-Origin-Opener-Policy"),
        "Request-Origin": request.headers.get("origin"),
        "CORS-Origin-Config": request.app.state.settings.CORS_ORIGIN,
    }
