from typing import Iterable, Optional, Tuple

WILDCARD = "*"

# Public site + local frontends; CORS_ORIGIN adds to these.
DEFAULT_ORIGINS: Tuple[str, ...] = (
    "http://localhost:5173",
    "http://localhost:3000",
    "https://sctsinstitute.com",
    "https://www.sctsinstitute.com",
)


def normalize_origin(value: str) -> str:
    value = value.strip()
    if value.endswith("/"):
        value = value[:-1]
    return value


def build_allow_list(defaults: Iterable[str], env_value: Optional[str] = None) -> Tuple[str, ...]:
    """
    Merge the default origins with a comma-separated env value.

    Entries are trimmed and lose one trailing slash; empties and duplicates are
    dropped, first occurrence wins. Nothing is validated as a URL, matching is
    exact-string later on.
    """
    allowed: list[str] = []
    for origin in defaults:
        if origin and origin not in allowed:
            allowed.append(origin)

    for raw in (env_value or "").split(","):
        origin = normalize_origin(raw)
        if origin and origin not in allowed:
            allowed.append(origin)

    return tuple(allowed)
