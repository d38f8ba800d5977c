from typing import List, Optional
from schemas.appointment import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    AvailabilityResult,
    appointment_from_document,
)
from config.catalog import TIME_SLOTS, service_duration
from config.database import Database
from crud.exceptions import SlotUnavailableError
from crud.utils import to_object_id, utcnow
import logging

logger = logging.getLogger(__name__)


async def check_appointment_availability(date: str, time: str) -> AvailabilityResult:
    """Check whether a pending or confirmed appointment already occupies the (date, time) slot."""
    db = Database()
    try:
        count = await db.appointments.count_documents({
            "date": date,
            "time": time,
            "status": {"$in": ACTIVE_STATUSES}
        })
    except Exception as e:
        logger.error(f"Error checking availability for {date} {time}: {str(e)}", exc_info=True)
        raise

    return AvailabilityResult(available=count == 0, count=count)


async def get_available_time_slots(date: str) -> List[str]:
    """Catalog time slots for a date, minus the ones already booked."""
    db = Database()
    booked = await db.appointments.find(
        {"date": date, "status": {"$in": ACTIVE_STATUSES}},
        {"time": 1}
    ).to_list(length=None)
    booked_times = {appointment["time"] for appointment in booked}
    return [slot for slot in TIME_SLOTS if slot not in booked_times]


async def save_appointment(appointment: AppointmentCreate, user_id: Optional[str] = None) -> Appointment:
    """Persist a new appointment after re-checking that its slot is still free.

    `user_id` is the signed-in owner, or None for a guest booking.

    The check and the insert are two separate operations, so two concurrent
    submissions for the same slot can both be stored.
    """
    try:
        availability = await check_appointment_availability(appointment.date, appointment.time)
        if not availability.available:
            raise SlotUnavailableError(appointment.date, appointment.time)

        db = Database()
        appointment_dict = appointment.model_dump()
        appointment_dict["user_id"] = user_id
        if not appointment_dict.get("duration"):
            appointment_dict["duration"] = service_duration(appointment.service)
        appointment_dict["status"] = "pending"
        appointment_dict["created_at"] = utcnow()

        result = await db.appointments.insert_one(appointment_dict)
        appointment_dict["_id"] = result.inserted_id

        logger.info(f"Appointment {result.inserted_id} booked for {appointment.date} {appointment.time}")
        return appointment_from_document(appointment_dict)

    except SlotUnavailableError:
        logger.info(f"Slot {appointment.date} {appointment.time} no longer available")
        raise
    except Exception as e:
        logger.error(f"Error saving appointment: {str(e)}", exc_info=True)
        raise


async def get_appointment(appointment_id: str) -> Optional[Appointment]:
    db = Database()
    appointment = await db.appointments.find_one({"_id": to_object_id(appointment_id)})
    return appointment_from_document(appointment) if appointment else None


async def get_user_appointments(user_id: str) -> List[Appointment]:
    """All appointments of a user, newest first."""
    db = Database()
    try:
        appointments = await db.appointments.find(
            {"user_id": user_id}
        ).sort("created_at", -1).to_list(length=None)
    except Exception as e:
        logger.error(f"Error fetching appointments for user {user_id}: {str(e)}", exc_info=True)
        raise
    return [appointment_from_document(appointment) for appointment in appointments]


async def update_appointment_status(appointment_id: str, status: AppointmentStatus) -> Optional[Appointment]:
    db = Database()
    try:
        update_result = await db.appointments.update_one(
            {"_id": to_object_id(appointment_id)},
            {"$set": {"status": status, "updated_at": utcnow()}}
        )
    except Exception as e:
        logger.error(f"Error updating status of appointment {appointment_id}: {str(e)}", exc_info=True)
        raise

    if update_result.matched_count:
        return await get_appointment(appointment_id)
    return None


async def cancel_appointment(appointment_id: str) -> Optional[Appointment]:
    """Cancel an appointment regardless of its current status."""
    return await update_appointment_status(appointment_id, "cancelled")
