# app/infrastructure/mongo.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import settings

logger = logging.getLogger("mongo")

# inicializados no lifespan (main.py)
client: Optional[AsyncIOMotorClient] = None
db: Optional[AsyncIOMotorDatabase] = None


def connect() -> AsyncIOMotorDatabase:
    global client, db
    if db is not None:
        return db
    client = AsyncIOMotorClient(settings.mongodb_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)
    db = client[settings.mongodb_db]
    logger.info("MongoDB client criado (database=%s)", settings.mongodb_db)
    return db


def get_database() -> AsyncIOMotorDatabase:
    # on-demand, caso o lifespan não tenha rodado (scripts, testes)
    return db if db is not None else connect()


def close() -> None:
    global client, db
    if client is not None:
        client.close()
        logger.info("MongoDB client fechado")
    client = None
    db = None


async def ping() -> bool:
    await get_database().command("ping")
    return True
