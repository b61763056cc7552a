# backend/pomotask/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from pomotask.core.config import settings

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient | None = None
db: AsyncIOMotorDatabase | None = None


async def connect_to_mongo():
    global client, db
    client = AsyncIOMotorClient(settings.MONGO_URI, tz_aware=True)
    db = client[settings.MONGO_DB_NAME]
    await _ensure_indexes(db)
    logger.info("MongoDB connected (%s)", settings.MONGO_DB_NAME)


async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        logger.info("MongoDB connection closed")
    client = None
    db = None


def get_db() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("MongoDB not initialized. Did you call connect_to_mongo()?")
    return db


async def _ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    await database["users"].create_index("email", unique=True)
    await database["users"].create_index("username", unique=True)
    await database["tasks"].create_index([("user_id", 1), ("created_at", 1)])
    await database["sessions"].create_index([("user_id", 1), ("started_at", -1)])
    # one history row per task per day
    await database["task_history"].create_index(
        [("task_id", 1), ("user_id", 1), ("date", 1)], unique=True
    )
