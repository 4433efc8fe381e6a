import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.config import Settings, settings as default_settings
from app.db.mongo import connect_to_mongo, close_mongo_connection
from app.db.indexes import ensure_indexes

# Rate limiting
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from app.utils.rate_limit import limiter, settings_ctx

# Boundary layer: origins, CORS, security headers, logging / errors
from app.utils.origins import DEFAULT_ORIGINS, build_allow_list
from app.utils.cors import DynamicCORSMiddleware
from app.utils.headers import SecurityHeadersMiddleware
from app.utils.logging import logger, log_request, request_id_ctx
from app.utils.errors import (
    handle_http_exception,
    handle_validation_error,
    handle_rate_limit,
    handle_unhandled,
)

# Routers
from app.routes import api_router
from app.uploads.routes import router as uploads_router
from app.docs.routes import router as docs_router
from app.system.routes import router as system_router, debug_router

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Request pipeline, outermost first:

      request context (id, dev access log)
      -> security headers
      -> CORS (deny: 403 and stop; preflight: 200 and stop; skipped for /uploads)
      -> error boundary (unhandled exception -> 500 envelope)
      -> routes: /uploads/* asset server, /api/*, system, docs
      -> 404 / error handlers
    """
    cfg = app_settings or default_settings

    app = FastAPI(
        title=cfg.APP_NAME,
        version="1.0.0",
        # /openapi.json and /api-docs are served from the static document
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    # Read-only for the life of the process
    app.state.settings = cfg
    app.state.allowed_origins = build_allow_list(DEFAULT_ORIGINS, cfg.CORS_ORIGIN)
    app.state.upload_root = cfg.upload_root
    app.state.db = None
    logger.info(f"CORS allow-list: {', '.join(app.state.allowed_origins)}")

    # ----- Middleware (added innermost first) -----
    @app.middleware("http")
    async def error_boundary(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unhandled(request, exc)

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        DynamicCORSMiddleware,
        allowed_origins=app.state.allowed_origins,
        max_age=cfg.CORS_MAX_AGE,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=cfg.TRUSTED_HOSTS)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        token = request_id_ctx.set(str(uuid.uuid4())[:8])
        settings_token = settings_ctx.set(cfg)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            if cfg.is_development:
                log_request(
                    request.method,
                    request.url.path,
                    response.status_code,
                    (time.perf_counter() - started) * 1000,
                )
            response.headers["X-Request-Id"] = request_id_ctx.get() or "-"
        finally:
            request_id_ctx.reset(token)
            settings_ctx.reset(settings_token)
        return response

    # ----- Exception Handlers -----
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)

    # ----- Lifecycle -----
    @app.on_event("startup")
    async def _startup():
        await connect_to_mongo(app, cfg)
        await ensure_indexes(app.state.db)
        logger.info("Startup complete")

    @app.on_event("shutdown")
    async def _shutdown():
        await close_mongo_connection(app)
        logger.info("Shutdown complete")

    # ----- Routers -----
    app.include_router(uploads_router)           # /uploads/* (terminates its own 404s)
    app.include_router(system_router)            # /, /health
    app.include_router(docs_router)              # /openapi.json, /api-docs
    app.include_router(api_router)               # /api/*
    if cfg.ENABLE_HEADER_DEBUG:
        app.include_router(debug_router)         # /__headers

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=default_settings.PORT)
