from bson import ObjectId
from bson.errors import InvalidId
from datetime import datetime, timezone

from crud.exceptions import InvalidObjectIdError


def to_object_id(id_str: str) -> ObjectId:
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise InvalidObjectIdError(f"Invalid ID format: {id_str}")


def utcnow() -> datetime:
    """Server-side timestamp for created_at/updated_at fields."""
    return datetime.now(timezone.utc)
