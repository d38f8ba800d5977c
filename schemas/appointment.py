from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime
from typing import Literal, Optional

from config.catalog import SERVICE_CODES, TIME_SLOTS

AppointmentStatus = Literal["pending", "confirmed", "cancelled"]

# Statuses that occupy a slot
ACTIVE_STATUSES = ["pending", "confirmed"]


class AppointmentBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = ""
    date: str = Field(..., description="Format: YYYY-MM-DD")
    time: str = Field(..., description="Format: HH:MM, one of the catalog time slots")
    service: str = Field(..., description="Service code from the catalog")
    duration: Optional[str] = Field(None, description="Duration tag, defaults to the service duration")
    participants: int = Field(1, ge=1)
    notes: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is required")
        return value.strip()

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError:
            raise ValueError("date must use the YYYY-MM-DD format")
        return value

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if value not in TIME_SLOTS:
            raise ValueError(f"time must be one of {', '.join(TIME_SLOTS)}")
        return value

    @field_validator("service")
    @classmethod
    def validate_service(cls, value: str) -> str:
        if value not in SERVICE_CODES:
            raise ValueError(f"service must be one of {', '.join(SERVICE_CODES)}")
        return value


class AppointmentCreate(AppointmentBase):
    """Booking form payload. Any status or owner sent by the client is ignored."""
    pass


class Appointment(AppointmentBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = Field(None, description="Owning user, None for guest bookings")
    status: AppointmentStatus = "pending"
    created_at: datetime
    updated_at: Optional[datetime] = None
    email_sent: bool = False
    email_sent_at: Optional[datetime] = None
    confirmation_email_sent: bool = False
    confirmation_email_sent_at: Optional[datetime] = None


class AvailabilityResult(BaseModel):
    available: bool
    count: int


class TimeSlotsResponse(BaseModel):
    date: str
    available_slots: list[str]


def appointment_from_document(document: dict) -> Appointment:
    """Build an Appointment from a stored document, exposing the ObjectId as a string id."""
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return Appointment(**data)
