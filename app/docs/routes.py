from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

from app.docs.publisher import get_spec, resolve_base_url

router = APIRouter(include_in_schema=False)


@router.get("/openapi.json")
async def openapi_document(request: Request):
    settings = request.app.state.settings
    base_url = resolve_base_url(
        forwarded_proto=request.headers.get("x-forwarded-proto"),
        forwarded_host=request.headers.get("x-forwarded-host"),
        request_protocol=request.url.scheme,
        request_host=request.headers.get("host"),
        configured_base_url=settings.PUBLIC_BASE_URL,
        fallback=f"http://localhost:{settings.PORT}",
    )
    doc = await get_spec(Path(settings.OPENAPI_SPEC_PATH), base_url)
    return JSONResponse(doc)


@router.get("/api-docs")
async def api_docs(request: Request):
    return get_swagger_ui_html(
        openapi_url="/openapi.json",
        title=f"{request.app.state.settings.APP_NAME} - API docs",
    )
