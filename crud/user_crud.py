from typing import Optional
from schemas.user import UserCreate, UserProfile, UserProfileUpdate, profile_from_document
from config.database import Database
from crud.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError, InvalidObjectIdError
from crud.utils import to_object_id, utcnow
from passlib.context import CryptContext
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def register_user(user: UserCreate) -> UserProfile:
    db = Database()
    email = user.email.lower()

    if await db.users.find_one({"email": email}):
        raise EmailAlreadyRegisteredError(email)

    now = utcnow()
    user_dict = {
        "name": user.name,
        "email": email,
        "phone": user.phone or "",
        "password_hash": pwd_context.hash(user.password.get_secret_value()),
        "created_at": now,
        "last_login": now
    }

    result = await db.users.insert_one(user_dict)
    user_dict["_id"] = result.inserted_id
    logger.info(f"Registered user {result.inserted_id}")
    return profile_from_document(user_dict)


async def login_user(email: str, password: str) -> UserProfile:
    db = Database()
    user = await db.users.find_one({"email": email.lower()})
    password_hash = user.get("password_hash") if user else None
    if not password_hash or not pwd_context.verify(password, password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    last_login = utcnow()
    await db.users.update_one(
        {"_id": user["_id"]},
        {"$set": {"last_login": last_login}}
    )
    user["last_login"] = last_login
    return profile_from_document(user)


async def get_user_data(user_id: str) -> Optional[UserProfile]:
    db = Database()
    try:
        object_id = to_object_id(user_id)
    except InvalidObjectIdError:
        return None
    user = await db.users.find_one({"_id": object_id})
    return profile_from_document(user) if user else None


async def update_user_profile(user_id: str, updates: UserProfileUpdate) -> Optional[UserProfile]:
    db = Database()
    update_data = updates.model_dump(exclude_none=True)
    update_data["updated_at"] = utcnow()

    update_result = await db.users.update_one(
        {"_id": to_object_id(user_id)},
        {"$set": update_data}
    )
    if update_result.matched_count:
        return await get_user_data(user_id)
    return None
