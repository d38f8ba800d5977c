from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional
from schemas.appointment import Appointment, AppointmentCreate, AvailabilityResult, TimeSlotsResponse
from crud import appointment_crud
from crud.exceptions import InvalidObjectIdError, SlotUnavailableError
from routes.dependencies import get_optional_session
from services.session_service import Session

router = APIRouter()


@router.get("/availability", response_model=AvailabilityResult)
async def check_availability(
    date: str = Query(..., description="YYYY-MM-DD"),
    time: str = Query(..., description="HH:MM")
):
    return await appointment_crud.check_appointment_availability(date, time)


@router.get("/slots", response_model=TimeSlotsResponse)
async def get_available_slots(date: str = Query(..., description="YYYY-MM-DD")):
    slots = await appointment_crud.get_available_time_slots(date)
    return TimeSlotsResponse(date=date, available_slots=slots)


@router.post("/", response_model=Appointment, status_code=201)
async def create_appointment(
    appointment: AppointmentCreate,
    session: Optional[Session] = Depends(get_optional_session)
):
    user_id = session.user_id if session is not None else None
    try:
        return await appointment_crud.save_appointment(appointment, user_id)
    except SlotUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/user/{user_id}", response_model=List[Appointment])
async def get_user_appointments(user_id: str):
    return await appointment_crud.get_user_appointments(user_id)


@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(appointment_id: str):
    try:
        appointment = await appointment_crud.get_appointment(appointment_id)
    except InvalidObjectIdError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.post("/{appointment_id}/cancel", response_model=Appointment)
async def cancel_appointment(appointment_id: str):
    try:
        appointment = await appointment_crud.cancel_appointment(appointment_id)
    except InvalidObjectIdError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment
