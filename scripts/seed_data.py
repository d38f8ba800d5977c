from motor.motor_asyncio import AsyncIOMotorClient
from datetime import datetime, timezone
import asyncio
import logging
import os
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEED_TESTIMONIALS = [
    {
        "user_id": "seed-marina",
        "name": "Marina S.",
        "profession": "Arquitecta",
        "comment": "NUVÓ cambió completamente mi relación con los perfumes. Encontré una esencia que realmente me representa, no solo me gusta.",
        "rating": 5,
        "fragrance": "Esencia Minimalista"
    },
    {
        "user_id": "seed-alejandro",
        "name": "Alejandro R.",
        "profession": "Fotógrafo",
        "comment": "La cata fue una experiencia increíble. Nunca pensé que un perfume pudiera evocar tantos recuerdos y emociones.",
        "rating": 5,
        "fragrance": "Elegancia Atemporal"
    },
    {
        "user_id": "seed-sofia",
        "name": "Sofia L.",
        "profession": "Diseñadora",
        "comment": "La sutileza de estas fragancias es única. Es exactamente lo que buscaba: elegancia sin ostentación.",
        "rating": 5,
        "fragrance": "Ritual Íntimo"
    }
]


async def insert_seed_data():
    client = AsyncIOMotorClient(os.getenv('MONGODB_URL'))
    db = client[os.getenv('DATABASE_NAME', 'nuvo_db')]

    try:
        for testimonial in SEED_TESTIMONIALS:
            existing = await db.testimonials.find_one({"user_id": testimonial["user_id"]})
            if existing:
                logger.info(f"Testimonial from {testimonial['name']} already exists")
                continue
            await db.testimonials.insert_one({**testimonial, "created_at": datetime.now(timezone.utc)})
            logger.info(f"Testimonial from {testimonial['name']} created")

        count = await db.testimonials.count_documents({})
        logger.info(f"Total testimonials in database: {count}")
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(insert_seed_data())
