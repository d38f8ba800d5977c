#!/usr/bin/env python3
"""
Independent worker that sends booking e-mails from the appointments change stream.

Run with: python -m workers.notification_worker
"""
import asyncio
import logging
from typing import Dict

from pymongo.errors import OperationFailure, PyMongoError

from config.database import Database
from config.settings import configure_logging
from services.email_service import EmailService
from services.notification_service import NotificationService

configure_logging()
logger = logging.getLogger("notification-worker")

RECONNECT_DELAY = 5  # seconds
HISTORY_LOST = 286  # ChangeStreamHistoryLost
WATCHED_OPERATIONS = ["insert", "update", "replace"]


async def dispatch_change(change: Dict, notification_service: NotificationService) -> None:
    """Route one change event of the appointments collection to its handler."""
    operation = change.get("operationType")
    document_key = change.get("documentKey") or {}
    appointment_id = document_key.get("_id")

    if appointment_id is None:
        logger.warning(f"Change event without document key ({operation}), ignoring")
        return

    if operation == "insert":
        await notification_service.handle_appointment_created(appointment_id, change.get("fullDocument"))
    elif operation in ("update", "replace"):
        before = change.get("fullDocumentBeforeChange")
        after = change.get("fullDocument")
        if before is None or after is None:
            logger.warning(f"Missing pre- or post-image for appointment {appointment_id}, cannot evaluate status change")
            return
        await notification_service.handle_appointment_updated(appointment_id, before, after)
    else:
        logger.debug(f"Ignoring {operation} event for appointment {appointment_id}")


class NotificationWorker:
    def __init__(self, notification_service: NotificationService = None):
        self.notification_service = notification_service
        self.running = False
        self.resume_token = None

    async def setup_connections(self):
        try:
            await Database.connect_db()
        except Exception as e:
            logger.error(f"Error configuring worker: {e}")
            raise

        # Update events need the document as it was before and right after the change
        try:
            await Database.db.command({
                "collMod": "appointments",
                "changeStreamPreAndPostImages": {"enabled": True}
            })
        except OperationFailure as e:
            logger.warning(f"Could not enable pre- and post-images on appointments: {e}")

        if self.notification_service is None:
            self.notification_service = NotificationService(Database.get_db(), EmailService())

    async def listen_changes(self):
        db = Database.get_db()
        pipeline = [{"$match": {"operationType": {"$in": WATCHED_OPERATIONS}}}]
        logger.info("Worker listening on the appointments change stream...")

        while self.running:
            try:
                async with db.appointments.watch(
                    pipeline,
                    full_document="whenAvailable",
                    full_document_before_change="whenAvailable",
                    resume_after=self.resume_token
                ) as stream:
                    async for change in stream:
                        await dispatch_change(change, self.notification_service)
                        self.resume_token = stream.resume_token
            except OperationFailure as e:
                if e.code == HISTORY_LOST:
                    logger.error(f"Resume point is no longer in the oplog, restarting from now: {e}")
                    self.resume_token = None
                else:
                    logger.error(f"Change stream error: {e}")
                await asyncio.sleep(RECONNECT_DELAY)
            except PyMongoError as e:
                logger.error(f"Change stream error: {e}")
                await asyncio.sleep(RECONNECT_DELAY)

    async def run(self):
        logger.info("Notification worker starting")
        await self.setup_connections()
        self.running = True
        try:
            await self.listen_changes()
        finally:
            self.running = False
            await Database.close_db()
            logger.info("Notification worker stopped")


if __name__ == "__main__":
    try:
        asyncio.run(NotificationWorker().run())
    except KeyboardInterrupt:
        logger.info("Worker interrupted by user")
