"""Manual triggers for the scheduled jobs."""

from dataclasses import asdict

from fastapi import APIRouter

from nagarkar.api.dependencies import AdminPrincipal, Calculator
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.api.schemas.jobs import OverdueCheckOut, WeeklyReminderOut
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.common import utcnow
from nagarkar.services.jobs import check_overdue_taxes, send_weekly_reminders

router = APIRouter(prefix="/cron", tags=["cron"])

OverdueCheckResponse = SuccessResponse[OverdueCheckOut]
WeeklyReminderResponse = SuccessResponse[WeeklyReminderOut]


@router.post("/check-overdue", summary="Run the daily overdue check now")
async def check_overdue(
    db: DatabaseSession, calculator: Calculator, _admin: AdminPrincipal
) -> OverdueCheckResponse:
    result = await check_overdue_taxes(db, calculator)
    return OverdueCheckResponse(
        message="Overdue tax check completed successfully",
        data=OverdueCheckOut(**asdict(result), timestamp=utcnow()),
    )


@router.post("/weekly-reminders", summary="Run the weekly reminders now")
async def weekly_reminders(
    db: DatabaseSession, _admin: AdminPrincipal
) -> WeeklyReminderResponse:
    result = await send_weekly_reminders(db)
    return WeeklyReminderResponse(
        message="Weekly reminders sent successfully",
        data=WeeklyReminderOut(**asdict(result), timestamp=utcnow()),
    )
