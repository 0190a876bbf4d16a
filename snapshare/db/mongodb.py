# snapshare/db/mongodb.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from functools import lru_cache
from typing import cast
from pymongo import ASCENDING
from snapshare.core.config import settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"

@lru_cache()
def get_mongodb() -> AsyncIOMotorDatabase:
    """
    Get MongoDB database connection with proper typing.
    Uses LRU cache to reuse the same connection.

    Returns:
        AsyncIOMotorDatabase: MongoDB database connection
    """
    client = AsyncIOMotorClient(
        settings.MONGODB_URL,
        maxPoolSize=settings.MONGODB_POOL_SIZE,
        maxIdleTimeMS=settings.MONGODB_MAX_IDLE_TIME_MS,
        tz_aware=True,
    )
    return cast(AsyncIOMotorDatabase, client[settings.MONGODB_DB_NAME])

def close_mongodb() -> None:
    """Close the cached client, if one was created."""
    if get_mongodb.cache_info().currsize:
        get_mongodb().client.close()
        get_mongodb.cache_clear()

# MongoDB indexes creation
async def create_mongodb_indexes() -> None:
    """
    Create all necessary MongoDB indexes for the application.
    This function should be called during application startup.

    The username autocomplete index is an Atlas Search index and has to be
    defined on the cluster (see USER_SEARCH_INDEX); it cannot be created here.
    """
    db = get_mongodb()
    try:
        logger.info("Creating MongoDB indexes...")
        await _create_users_indexes(db)
        logger.info("MongoDB indexes created successfully")
    except Exception as e:
        logger.error("Error creating MongoDB indexes: %s", str(e))
        # Don't raise the exception to allow the application to start

async def _create_users_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for the users collection"""
    users = db[USERS_COLLECTION]

    # Registration uniqueness
    await users.create_index([("username", ASCENDING)],
                             unique=True,
                             name="user_username_unique")
    await users.create_index([("email", ASCENDING)],
                             unique=True,
                             name="user_email_unique")

    # Like/unlike locate the owner by embedded image id
    await users.create_index([("images.id", ASCENDING)],
                             sparse=True,
                             name="user_image_lookup")

    # Password reset lookup
    await users.create_index([("reset_password_token", ASCENDING)],
                             sparse=True,
                             name="user_reset_token")
