"""Database client helpers for application services."""

from motor.motor_asyncio import AsyncIOMotorClient

from app.shared.storage.mongo import get_mongo_client

# MongoDB label for the application database
ROAST_MONGO_LABEL = "roast_primary"


def get_roast_mongo_client() -> AsyncIOMotorClient:
    """Get MongoDB client for the application database.

    Configured by MONGO_URL_ROAST_PRIMARY, falling back to the default connection.
    """
    return get_mongo_client(ROAST_MONGO_LABEL)
