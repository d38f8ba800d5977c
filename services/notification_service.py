from bson import ObjectId
from typing import Dict, Optional, Union
from config.database import Database
from crud.utils import to_object_id, utcnow
from services.email_service import EmailService
from services.email_templates import render_confirmed_email, render_pending_email
import logging

logger = logging.getLogger(__name__)

DocumentId = Union[str, ObjectId]


def should_send_confirmation(before: Optional[Dict], after: Optional[Dict]) -> bool:
    """True only when an update moves the appointment into 'confirmed'."""
    if not before or not after:
        return False
    return before.get("status") != "confirmed" and after.get("status") == "confirmed"


class NotificationService:
    """Sends the booking e-mails in reaction to appointment document events.

    Handlers never raise: failures are logged and the event is considered handled.
    Each e-mail is guarded by a marker claimed atomically on the document, so a
    redelivered event does not send it twice.
    """

    def __init__(self, db: Optional[Database] = None, mailer: Optional[EmailService] = None):
        self.db = db or Database()
        self.mailer = mailer or EmailService()

    async def _claim(self, object_id: ObjectId, marker: str, sent_flag: str) -> bool:
        result = await self.db.appointments.update_one(
            {
                "_id": object_id,
                sent_flag: {"$ne": True},
                marker: {"$exists": False}
            },
            {"$set": {marker: utcnow()}}
        )
        return result.modified_count == 1

    async def handle_appointment_created(self, appointment_id: DocumentId, data: Optional[Dict]) -> None:
        if not data:
            logger.info("No data associated with the create event")
            return

        email = data.get("email")

        try:
            object_id = appointment_id if isinstance(appointment_id, ObjectId) else to_object_id(appointment_id)
            if not await self._claim(object_id, "email_claimed_at", "email_sent"):
                logger.info(f"Booking e-mail for appointment {object_id} already handled, skipping")
                return
        except Exception as e:
            logger.error(f"Error claiming booking e-mail for appointment {appointment_id}: {str(e)}", exc_info=True)
            return

        subject, html = render_pending_email(data)
        sent = await self.mailer.send_email(email, subject, html)
        if not sent:
            logger.error(f"Error sending booking e-mail for appointment {object_id} to {email}")
            return

        logger.info(f"Booking e-mail sent to {email}")
        try:
            await self.db.appointments.update_one(
                {"_id": object_id},
                {"$set": {"email_sent": True, "email_sent_at": utcnow()}}
            )
        except Exception as e:
            logger.error(f"Error updating appointment {object_id} after sending e-mail: {str(e)}", exc_info=True)

    async def handle_appointment_updated(
        self,
        appointment_id: DocumentId,
        before: Optional[Dict],
        after: Optional[Dict]
    ) -> None:
        if not before or not after:
            logger.info("No data associated with the update event")
            return

        if not should_send_confirmation(before, after):
            return

        email = after.get("email")

        try:
            object_id = appointment_id if isinstance(appointment_id, ObjectId) else to_object_id(appointment_id)
            if not await self._claim(object_id, "confirmation_claimed_at", "confirmation_email_sent"):
                logger.info(f"Confirmation e-mail for appointment {object_id} already handled, skipping")
                return
        except Exception as e:
            logger.error(f"Error claiming confirmation e-mail for appointment {appointment_id}: {str(e)}", exc_info=True)
            return

        subject, html = render_confirmed_email(after)
        sent = await self.mailer.send_email(email, subject, html)
        if not sent:
            logger.error(f"Error sending confirmation e-mail for appointment {object_id} to {email}")
            return

        logger.info(f"Confirmation e-mail sent to {email}")
        try:
            await self.db.appointments.update_one(
                {"_id": object_id},
                {"$set": {"confirmation_email_sent": True, "confirmation_email_sent_at": utcnow()}}
            )
        except Exception as e:
            logger.error(f"Error updating appointment {object_id} after confirmation e-mail: {str(e)}", exc_info=True)
