"""
MongoDB connection and Beanie registration shared by the API, the sweeper
process and the backfill script.
"""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from medreminder.adapters.db.mongo.models.reminder_m import DoseInstanceMongo, ReminderMongo
from medreminder.core.config import DatabaseSettings

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [ReminderMongo, DoseInstanceMongo]


def create_client(database: DatabaseSettings) -> AsyncIOMotorClient:
    """Motor client; TLS with the certifi CA bundle for Atlas SRV URIs only."""
    if database.uri.startswith("mongodb+srv://"):
        return AsyncIOMotorClient(
            database.uri,
            serverSelectionTimeoutMS=database.server_selection_timeout_ms,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    # Local/standard connection (no TLS)
    return AsyncIOMotorClient(database.uri, serverSelectionTimeoutMS=database.server_selection_timeout_ms)


async def init_database(database: DatabaseSettings) -> AsyncIOMotorClient:
    """Connect and register the document models (creates their indexes)."""
    client = create_client(database)
    await init_beanie(database=client[database.db_name], document_models=DOCUMENT_MODELS)
    logger.info(f"Database connection established (db={database.db_name})")
    return client
