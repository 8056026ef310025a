"""Tax report and dashboards."""

from typing import Annotated

from fastapi import APIRouter, Query

from nagarkar.api.dependencies import AdminPrincipal, CitizenPrincipal
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.api.schemas.reports import (
    AdminAnalyticsOut,
    CitizenAnalyticsOut,
    TaxReportOut,
)
from nagarkar.core.security import ensure_citizen_access
from nagarkar.domain.enums import TaxStatus
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.analytics import AnalyticsService
from nagarkar.services.reports import ReportService

router = APIRouter(tags=["reports"])

ReportResponse = SuccessResponse[TaxReportOut]
AdminAnalyticsResponse = SuccessResponse[AdminAnalyticsOut]
CitizenAnalyticsResponse = SuccessResponse[CitizenAnalyticsOut]


@router.get("/report", summary="Filtered tax report")
async def tax_report(
    db: DatabaseSession,
    _admin: AdminPrincipal,
    status: TaxStatus | None = None,
    district_id: int | None = None,
    tax_year: int | None = None,
    search: Annotated[str | None, Query(description="Name or customer ID")] = None,
) -> ReportResponse:
    report = await ReportService(db).tax_report(
        status=status, district_id=district_id, tax_year=tax_year, search=search
    )
    return ReportResponse(data=report)


@router.get("/analytics/admin", tags=["analytics"], summary="Municipality dashboard")
async def admin_analytics(
    db: DatabaseSession,
    _admin: AdminPrincipal,
    year: Annotated[int | None, Query(ge=1900, le=2100)] = None,
) -> AdminAnalyticsResponse:
    result = await AnalyticsService(db).admin_dashboard(year)
    return AdminAnalyticsResponse(data=result)


@router.get(
    "/analytics/citizen/{citizen_id}",
    tags=["analytics"],
    summary="Personal dashboard of a citizen",
)
async def citizen_analytics(
    citizen_id: int, db: DatabaseSession, principal: CitizenPrincipal
) -> CitizenAnalyticsResponse:
    ensure_citizen_access(principal, citizen_id, "Unauthorized access")
    result = await AnalyticsService(db).citizen_dashboard(citizen_id)
    return CitizenAnalyticsResponse(data=result)
