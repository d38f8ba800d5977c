from motor.motor_asyncio import AsyncIOMotorClient
import logging
import asyncio
import os
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from config.settings import configure_logging

configure_logging()
logger = logging.getLogger('database')

REQUIRED_COLLECTIONS = ['users', 'appointments', 'testimonials']


class Database:
    client = None
    db = None
    MAX_RETRIES = 3
    RETRY_DELAY = 1  # seconds

    @classmethod
    async def connect_db(cls):
        """Create database connection with retries."""
        retries = 0
        last_error = None

        while retries < cls.MAX_RETRIES:
            try:
                mongodb_url = os.getenv('MONGODB_URL')
                database_name = os.getenv('DATABASE_NAME', 'nuvo_db')

                if not mongodb_url:
                    raise ValueError("MONGODB_URL environment variable is not set")

                logger.info(f"Attempting to connect to MongoDB (Attempt {retries + 1}/{cls.MAX_RETRIES})")

                cls.client = AsyncIOMotorClient(
                    mongodb_url,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    socketTimeoutMS=10000,
                    maxPoolSize=50,
                    retryWrites=True,
                    retryReads=True
                )
                cls.db = cls.client[database_name]

                await cls.db.command('ping')

                logger.info(f"Successfully connected to MongoDB database: {database_name}")

                collections = await cls.db.list_collection_names()
                for collection in REQUIRED_COLLECTIONS:
                    if collection not in collections:
                        await cls.db.create_collection(collection)
                        logger.info(f"Created collection: {collection}")

                # Availability queries filter on (date, time, status); user listings on user_id
                await cls.db.appointments.create_index([("date", 1), ("time", 1), ("status", 1)])
                await cls.db.appointments.create_index([("user_id", 1), ("created_at", -1)])
                await cls.db.testimonials.create_index("user_id")
                await cls.db.users.create_index("email")
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                last_error = e
                retries += 1
                if retries < cls.MAX_RETRIES:
                    logger.warning(f"Failed to connect to MongoDB (Attempt {retries}/{cls.MAX_RETRIES}). Retrying in {cls.RETRY_DELAY} seconds...")
                    await asyncio.sleep(cls.RETRY_DELAY)
                continue
            except Exception as e:
                logger.error(f"Unexpected error connecting to MongoDB: {str(e)}")
                raise

        logger.error(f"Failed to connect to MongoDB after {cls.MAX_RETRIES} attempts")
        raise last_error

    @classmethod
    async def close_db(cls):
        """Close database connection."""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("MongoDB connection closed.")

    def __init__(self):
        if self.db is None:
            raise Exception("Database not initialized. Call connect_db() first.")

        self.users = self.db.users
        self.appointments = self.db.appointments
        self.testimonials = self.db.testimonials

    @classmethod
    def get_db(cls) -> 'Database':
        """Get database instance."""
        if cls.db is None:
            raise Exception("Database not initialized. Call connect_db() first.")
        return cls()

