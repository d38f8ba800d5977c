import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from crud import appointment_crud
from crud.exceptions import InvalidObjectIdError, SlotUnavailableError
from schemas.appointment import AppointmentCreate


class TestAvailability:
    async def test_empty_slot_is_available(self):
        result = await appointment_crud.check_appointment_availability("2025-06-01", "10:00")
        assert result.available is True
        assert result.count == 0

    async def test_booked_slot_is_unavailable(self, appointment_draft):
        await appointment_crud.save_appointment(appointment_draft)

        result = await appointment_crud.check_appointment_availability("2025-06-01", "10:00")
        assert result.available is False
        assert result.count == 1

    async def test_confirmed_slot_is_unavailable(self, mock_database, appointment_payload):
        await mock_database.appointments.insert_one({**appointment_payload, "status": "confirmed"})

        result = await appointment_crud.check_appointment_availability("2025-06-01", "10:00")
        assert result.available is False

    async def test_cancelled_appointment_frees_the_slot(self, mock_database, appointment_payload):
        await mock_database.appointments.insert_one({**appointment_payload, "status": "cancelled"})

        result = await appointment_crud.check_appointment_availability("2025-06-01", "10:00")
        assert result.available is True
        assert result.count == 0

    async def test_other_time_on_same_date_is_available(self, appointment_draft):
        await appointment_crud.save_appointment(appointment_draft)

        result = await appointment_crud.check_appointment_availability("2025-06-01", "11:00")
        assert result.available is True

    async def test_available_time_slots_exclude_booked(self, appointment_draft, mock_database, appointment_payload):
        await appointment_crud.save_appointment(appointment_draft)
        await mock_database.appointments.insert_one({**appointment_payload, "time": "15:00", "status": "cancelled"})

        slots = await appointment_crud.get_available_time_slots("2025-06-01")
        assert "10:00" not in slots
        assert "15:00" in slots
        assert len(slots) == 7

    async def test_backend_failure_propagates(self, monkeypatch):
        failing_db = MagicMock()
        failing_db.appointments.count_documents = AsyncMock(side_effect=RuntimeError("backend unavailable"))
        monkeypatch.setattr(appointment_crud, "Database", lambda: failing_db)

        with pytest.raises(RuntimeError):
            await appointment_crud.check_appointment_availability("2025-06-01", "10:00")


class TestSaveAppointment:
    async def test_saved_appointment_is_pending_with_timestamp(self, appointment_draft):
        appointment = await appointment_crud.save_appointment(appointment_draft)

        assert ObjectId.is_valid(appointment.id)
        assert appointment.status == "pending"
        assert appointment.created_at is not None
        assert appointment.duration == "45 min"
        assert appointment.user_id is None

    async def test_owner_comes_from_the_caller(self, appointment_payload):
        draft = AppointmentCreate.model_validate({**appointment_payload, "user_id": "victim-uid"})

        appointment = await appointment_crud.save_appointment(draft, "user-1")
        stored = await appointment_crud.get_appointment(appointment.id)
        assert appointment.user_id == "user-1"
        assert stored.user_id == "user-1"

    async def test_client_status_is_ignored(self, appointment_payload):
        draft = AppointmentCreate.model_validate({**appointment_payload, "status": "confirmed"})

        appointment = await appointment_crud.save_appointment(draft)
        stored = await appointment_crud.get_appointment(appointment.id)
        assert appointment.status == "pending"
        assert stored.status == "pending"

    async def test_second_submission_for_same_slot_is_rejected(self, appointment_draft, mock_database):
        await appointment_crud.save_appointment(appointment_draft)

        with pytest.raises(SlotUnavailableError) as exc_info:
            await appointment_crud.save_appointment(appointment_draft)

        assert "ya no están disponibles" in str(exc_info.value)
        assert await mock_database.appointments.count_documents({}) == 1

    async def test_slot_can_be_rebooked_after_cancellation(self, appointment_draft, mock_database):
        first = await appointment_crud.save_appointment(appointment_draft)
        await appointment_crud.cancel_appointment(first.id)

        second = await appointment_crud.save_appointment(appointment_draft)
        assert second.id != first.id
        assert await mock_database.appointments.count_documents({}) == 2

    async def test_concurrent_submissions_can_both_succeed(self, monkeypatch, appointment_payload, mock_database):
        # Both availability reads complete before either insert runs.
        original_check = appointment_crud.check_appointment_availability
        both_checked = asyncio.Event()
        results = []

        async def gated_check(date, time):
            result = await original_check(date, time)
            results.append(result)
            if len(results) == 2:
                both_checked.set()
            await both_checked.wait()
            return result

        monkeypatch.setattr(appointment_crud, "check_appointment_availability", gated_check)

        first, second = await asyncio.gather(
            appointment_crud.save_appointment(AppointmentCreate(**appointment_payload)),
            appointment_crud.save_appointment(AppointmentCreate(**{**appointment_payload, "name": "Beatriz"}))
        )

        assert first.id != second.id
        assert all(result.available for result in results)
        assert await mock_database.appointments.count_documents({"date": "2025-06-01", "time": "10:00"}) == 2


class TestAppointmentLifecycle:
    async def test_cancel_changes_only_status(self, appointment_draft, mock_database):
        appointment = await appointment_crud.save_appointment(appointment_draft)
        before = await mock_database.appointments.find_one({"_id": ObjectId(appointment.id)})

        cancelled = await appointment_crud.cancel_appointment(appointment.id)
        after = await mock_database.appointments.find_one({"_id": ObjectId(appointment.id)})

        assert cancelled.status == "cancelled"
        assert after["status"] == "cancelled"
        assert after["updated_at"] is not None
        untouched = set(before) - {"status", "updated_at"}
        assert {key: after[key] for key in untouched} == {key: before[key] for key in untouched}

    async def test_cancel_is_unconditional(self, mock_database, appointment_payload):
        result = await mock_database.appointments.insert_one(
            {**appointment_payload, "status": "confirmed", "created_at": datetime(2025, 5, 1, tzinfo=timezone.utc)}
        )

        cancelled = await appointment_crud.cancel_appointment(str(result.inserted_id))
        assert cancelled.status == "cancelled"

    async def test_cancel_unknown_appointment_returns_none(self):
        assert await appointment_crud.cancel_appointment(str(ObjectId())) is None

    async def test_invalid_id_raises(self):
        with pytest.raises(InvalidObjectIdError):
            await appointment_crud.get_appointment("not-an-id")

    async def test_user_appointments_newest_first(self, mock_database, appointment_payload):
        created = datetime(2025, 5, 1, tzinfo=timezone.utc)
        older = await mock_database.appointments.insert_one(
            {**appointment_payload, "user_id": "user-1", "status": "pending", "created_at": created}
        )
        newer = await mock_database.appointments.insert_one(
            {**appointment_payload, "user_id": "user-1", "time": "11:00", "status": "pending",
             "created_at": created + timedelta(hours=1)}
        )
        await mock_database.appointments.insert_one(
            {**appointment_payload, "user_id": "user-2", "time": "12:00", "status": "pending", "created_at": created}
        )

        appointments = await appointment_crud.get_user_appointments("user-1")
        assert [appointment.id for appointment in appointments] == [str(newer.inserted_id), str(older.inserted_id)]
