"""MongoDB/Beanie fixtures for testing."""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.schemas import ALL_DOCUMENT_MODELS, init_beanie_odm

# Tests needing MongoDB are skipped unless this points at a disposable server
TEST_MONGO_URL_KEY = "MONGO_URL_ROAST_TEST"


@pytest.fixture(scope="session")
def mongo_url() -> str:
    """
    Get MongoDB URL for testing.

    Only the explicit test variable is honoured so that a developer's
    primary database is never touched by the suite.
    """
    url = os.environ.get(TEST_MONGO_URL_KEY)
    if not url:
        pytest.skip(f"{TEST_MONGO_URL_KEY} environment variable not set for tests.")
    return url


@pytest.fixture(scope="session")
def test_db_name() -> str:
    """Get test database name."""
    return "roast_live_test_db"


@pytest_asyncio.fixture(scope="function")
async def mongo_client(mongo_url: str) -> AsyncGenerator[AsyncIOMotorClient]:
    """Create MongoDB client for testing (function-scoped to avoid event loop issues)."""
    client: AsyncIOMotorClient = AsyncIOMotorClient(mongo_url, tz_aware=True)
    yield client
    client.close()


@pytest_asyncio.fixture(scope="function")
async def beanie_db(
    mongo_client: AsyncIOMotorClient,
    test_db_name: str,
) -> AsyncGenerator[AsyncIOMotorDatabase]:
    """
    Initialize Beanie with every document model against the test database.

    Use `clear_collections` to start a test from empty collections.
    """
    db = mongo_client[test_db_name]

    await init_beanie_odm(db)

    yield db


@pytest_asyncio.fixture(autouse=False)
async def clear_collections(beanie_db: AsyncIOMotorDatabase) -> None:
    """
    Clear all collections before each test.

    Usage:
        @pytest.mark.usefixtures("clear_collections")
        async def test_something(beanie_db):
            ...
    """
    for model in ALL_DOCUMENT_MODELS:
        await model.get_motor_collection().delete_many({})
