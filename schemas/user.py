from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: SecretStr = Field(..., min_length=6)
    phone: str = ""


class UserLogin(BaseModel):
    email: EmailStr
    password: SecretStr


class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uid: str
    name: str
    email: EmailStr
    phone: str = ""
    created_at: datetime
    last_login: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    token: str
    user: UserProfile


def profile_from_document(document: dict) -> UserProfile:
    """Public profile view of a users document; the password hash is never exposed."""
    data = {key: value for key, value in document.items() if key not in ("_id", "password_hash")}
    data["uid"] = str(document["_id"])
    return UserProfile(**data)
