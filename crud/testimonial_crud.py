from typing import List, Optional
from schemas.testimonial import Testimonial, TestimonialCreate, testimonial_from_document, testimonial_or_none
from config.database import Database
from crud.exceptions import TestimonialExistsError
from crud.utils import utcnow
import logging

logger = logging.getLogger(__name__)


async def has_user_submitted_testimonial(user_id: str) -> bool:
    db = Database()
    existing = await db.testimonials.find_one({"user_id": user_id}, {"_id": 1})
    return existing is not None


async def get_user_testimonial(user_id: str) -> Optional[Testimonial]:
    db = Database()
    testimonial = await db.testimonials.find_one({"user_id": user_id})
    return testimonial_or_none(testimonial)


async def get_testimonials() -> List[Testimonial]:
    db = Database()
    testimonials = await db.testimonials.find().sort("created_at", -1).to_list(length=None)
    return [testimonial_from_document(testimonial) for testimonial in testimonials]


async def add_testimonial(user_id: str, testimonial: TestimonialCreate) -> Testimonial:
    """Store a user's testimonial. Each user may leave only one."""
    try:
        if await has_user_submitted_testimonial(user_id):
            raise TestimonialExistsError(user_id)

        db = Database()
        testimonial_dict = testimonial.model_dump()
        testimonial_dict["user_id"] = user_id
        testimonial_dict["created_at"] = utcnow()

        result = await db.testimonials.insert_one(testimonial_dict)
        testimonial_dict["_id"] = result.inserted_id
        return testimonial_from_document(testimonial_dict)

    except TestimonialExistsError:
        logger.info(f"User {user_id} already has a testimonial on file")
        raise
    except Exception as e:
        logger.error(f"Error adding testimonial for user {user_id}: {str(e)}", exc_info=True)
        raise
