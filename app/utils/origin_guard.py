from enum import Enum
from typing import Dict, Optional, Sequence

from app.utils.origins import WILDCARD

API_ALLOW_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
API_ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With, Accept"


class CorsDecision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def decide(origin: Optional[str], allow_list: Sequence[str]) -> CorsDecision:
    # No Origin header: curl, server-to-server, mobile apps.
    if not origin:
        return CorsDecision.ALLOW
    if WILDCARD in allow_list or origin in allow_list:
        return CorsDecision.ALLOW
    return CorsDecision.DENY


def is_allowed_origin(origin: Optional[str], allow_list: Sequence[str]) -> bool:
    """True only for a present origin the allow-list accepts."""
    return bool(origin) and (WILDCARD in allow_list or origin in allow_list)


def allow_origin_headers(origin: Optional[str]) -> Dict[str, str]:
    # Credentials are on, so the origin is echoed and never "*".
    if not origin:
        return {}
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Vary": "Origin",
    }


def preflight_headers(origin: Optional[str], max_age: int) -> Dict[str, str]:
    headers = allow_origin_headers(origin)
    headers.update({
        "Access-Control-Allow-Methods": API_ALLOW_METHODS,
        "Access-Control-Allow-Headers": API_ALLOW_HEADERS,
        "Access-Control-Max-Age": str(max_age),
    })
    return headers
