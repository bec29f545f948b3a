import logging

import motor.motor_asyncio
from hs_rosetta.core.config import settings

logger = logging.getLogger(__name__)

# Global client and db variables
client: motor.motor_asyncio.AsyncIOMotorClient = None
db = None


async def connect_to_mongo():
    global client, db
    client = motor.motor_asyncio.AsyncIOMotorClient(settings.MONGO_DETAILS)
    db = client[settings.DATABASE_NAME]
    logger.info("Connected to MongoDB (database=%s).", settings.DATABASE_NAME)


async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        client = None
        db = None
        logger.info("MongoDB connection closed.")


def get_db():
    if db is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo first.")
    return db


# The node's indexer owns these collections; the middleware only reads them,
# apart from inserting relayed transactions into the mempool.
def get_blocks_collection():
    return get_db()["blocks"]


def get_coins_collection():
    return get_db()["coins"]


def get_undo_collection():
    return get_db()["undo"]


def get_mempool_collection():
    return get_db()["mempool"]


def get_peers_collection():
    return get_db()["peers"]
