import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool

from app.utils.logging import logger

SERVER_DESCRIPTION = "Current server"


def _first(value: Optional[str]) -> str:
    # X-Forwarded-* may carry a comma-separated proxy chain; the client side is first
    return (value or "").split(",")[0].strip()


def resolve_base_url(
    forwarded_proto: Optional[str],
    forwarded_host: Optional[str],
    request_protocol: Optional[str],
    request_host: Optional[str],
    configured_base_url: Optional[str],
    fallback: str,
) -> str:
    """Configured URL, else the (forwarded) request origin, else the local fallback."""
    configured = (configured_base_url or "").strip().rstrip("/")
    if configured:
        return configured

    proto = _first(forwarded_proto) or _first(request_protocol)
    host = _first(forwarded_host) or _first(request_host)
    if proto and host:
        return f"{proto}://{host}"

    return fallback


def load_spec(path: Path) -> Dict[str, Any]:
    """Read the static OpenAPI document; a missing or broken file yields {}."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            doc = json.load(fh)
    except FileNotFoundError:
        logger.warning(f"OpenAPI spec not found at {path}; serving an empty document")
        return {}
    except (OSError, ValueError) as e:
        logger.error(f"OpenAPI spec at {path} could not be read: {e}")
        return {}
    return doc if isinstance(doc, dict) else {}


def with_server(doc: Dict[str, Any], base_url: str) -> Dict[str, Any]:
    out = copy.deepcopy(doc)
    out["servers"] = [{"url": base_url, "description": SERVER_DESCRIPTION}]
    return out


async def get_spec(path: Path, base_url: str) -> Dict[str, Any]:
    doc = await run_in_threadpool(load_spec, path)
    return with_server(doc, base_url)
