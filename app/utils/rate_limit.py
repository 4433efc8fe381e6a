from contextvars import ContextVar
from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import Settings, settings

# Set per request by create_app so limits follow the app's own Settings.
settings_ctx: ContextVar[Optional[Settings]] = ContextVar("settings", default=None)

# Public, unauthenticated routes: key on client IP.
limiter = Limiter(key_func=get_remote_address)

def public_rate_limit() -> str:
    cfg = settings_ctx.get() or settings
    return f"{cfg.RATE_PUBLIC_PER_MIN}/minute"
