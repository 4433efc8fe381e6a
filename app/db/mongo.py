from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional

from app.config import Settings

_client: Optional[AsyncIOMotorClient] = None

async def connect_to_mongo(app, settings: Settings) -> None:
    """Create client and attach DB handle to app.state.db."""
    global _client
    # Motor connects lazily; the first query surfaces connection errors.
    _client = AsyncIOMotorClient(settings.MONGO_URI)
    app.state.db = _client[settings.MONGO_DATABASE]

async def close_mongo_connection(app) -> None:
    global _client
    if _client:
        _client.close()
        _client = None
        app.state.db = None
