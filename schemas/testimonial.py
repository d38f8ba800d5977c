from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class TestimonialCreate(BaseModel):
    name: str = Field(..., min_length=1)
    profession: str = ""
    comment: str = Field(..., min_length=1)
    rating: int = Field(5, ge=1, le=5)
    fragrance: str = Field("", description="Fragrance the review refers to")


class Testimonial(TestimonialCreate):
    id: str
    user_id: str
    created_at: datetime


def testimonial_from_document(document: dict) -> Testimonial:
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return Testimonial(**data)


def testimonial_or_none(document: Optional[dict]) -> Optional[Testimonial]:
    return testimonial_from_document(document) if document else None
