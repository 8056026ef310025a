from typing import Annotated

from fastapi import APIRouter, Query, status

from nagarkar.api.dependencies import AdminPrincipal, CurrentPrincipal
from nagarkar.api.schemas.citizens import (
    CitizenCreate,
    CitizenListingOut,
    CitizenOut,
    CitizenTaxDetailsOut,
)
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.core.security import ensure_citizen_access
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.citizens import CitizenService

router = APIRouter(prefix="/citizen", tags=["citizens"])

CitizenListResponse = SuccessResponse[list[CitizenListingOut]]
CitizenResponse = SuccessResponse[CitizenOut]
TaxDetailsResponse = SuccessResponse[CitizenTaxDetailsOut]


@router.get("", summary="List citizens")
async def list_citizens(
    db: DatabaseSession,
    _admin: AdminPrincipal,
    search: Annotated[
        str | None, Query(description="Name, customer ID or contact number")
    ] = None,
    district_id: int | None = None,
) -> CitizenListResponse:
    listings = await CitizenService(db).list_citizens(search, district_id)
    return CitizenListResponse(data=listings)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a citizen")
async def register_citizen(
    body: CitizenCreate, db: DatabaseSession, _admin: AdminPrincipal
) -> CitizenResponse:
    citizen = await CitizenService(db).register_citizen(**body.model_dump())
    return CitizenResponse(message="Citizen registered successfully", data=citizen)


@router.get("/{citizen_id}/tax", summary="Tax details of a citizen")
async def get_tax_details(
    citizen_id: int, db: DatabaseSession, principal: CurrentPrincipal
) -> TaxDetailsResponse:
    ensure_citizen_access(principal, citizen_id)
    details = await CitizenService(db).get_tax_details(citizen_id)
    return TaxDetailsResponse(data=details)
