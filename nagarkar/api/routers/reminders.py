"""Reminder records and SMS delivery."""

from fastapi import APIRouter, status

from nagarkar.api.dependencies import AdminPrincipal, CurrentPrincipal, Sms
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.api.schemas.reminders import (
    BulkReminderRequest,
    CitizenRemindersOut,
    ReminderCreate,
    ReminderOut,
    SmsBatchOut,
    SmsSendRequest,
)
from nagarkar.core.security import ensure_citizen_access
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.reminders import ReminderService

router = APIRouter(tags=["reminders"])

ReminderListResponse = SuccessResponse[list[ReminderOut]]
CitizenRemindersResponse = SuccessResponse[CitizenRemindersOut]
SmsBatchResponse = SuccessResponse[SmsBatchOut]


@router.post(
    "/reminder",
    status_code=status.HTTP_201_CREATED,
    summary="Record a reminder for several citizens",
)
async def create_reminders(
    body: ReminderCreate, db: DatabaseSession, _admin: AdminPrincipal
) -> ReminderListResponse:
    reminders = await ReminderService(db).create_reminders(
        body.citizen_ids, body.message
    )
    return ReminderListResponse(
        message=f"Reminders sent to {len(reminders)} citizens", data=reminders
    )


@router.get("/reminder/{citizen_id}", summary="Reminders of a citizen")
async def list_reminders(
    citizen_id: int, db: DatabaseSession, principal: CurrentPrincipal
) -> CitizenRemindersResponse:
    ensure_citizen_access(principal, citizen_id)
    result = await ReminderService(db).list_for_citizen(citizen_id)
    return CitizenRemindersResponse(data=result)


@router.post("/sms/send", tags=["sms"], summary="Text selected citizens")
async def send_sms(
    body: SmsSendRequest, db: DatabaseSession, sms: Sms, _admin: AdminPrincipal
) -> SmsBatchResponse:
    batch = await ReminderService(db, sms).send_sms(
        body.citizen_ids, body.message, body.type
    )
    return SmsBatchResponse(
        message=f"SMS sent to {batch.successful} citizens, {batch.failed} failed",
        data=batch,
    )


@router.post("/sms/bulk-reminder", tags=["sms"], summary="Text citizens by situation")
async def send_bulk_reminders(
    body: BulkReminderRequest, db: DatabaseSession, sms: Sms, _admin: AdminPrincipal
) -> SmsBatchResponse:
    batch = await ReminderService(db, sms).send_bulk_reminders(
        body.reminder_type, body.custom_message
    )
    if batch.total == 0:
        message = "No eligible citizens found for this reminder type"
    else:
        message = (
            f"Bulk {body.reminder_type} reminders sent to {batch.successful} "
            f"citizens, {batch.failed} failed"
        )
    return SmsBatchResponse(message=message, data=batch)
