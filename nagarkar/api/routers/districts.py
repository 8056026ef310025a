from fastapi import APIRouter, status

from nagarkar.api.dependencies import AdminPrincipal
from nagarkar.api.schemas.citizens import (
    DistrictCreate,
    DistrictListingOut,
    DistrictOut,
)
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.districts import DistrictService

router = APIRouter(prefix="/district", tags=["districts"])

DistrictListResponse = SuccessResponse[list[DistrictListingOut]]
DistrictResponse = SuccessResponse[DistrictOut]


@router.get("", summary="List districts with citizen counts")
async def list_districts(
    db: DatabaseSession, _admin: AdminPrincipal
) -> DistrictListResponse:
    return DistrictListResponse(data=await DistrictService(db).list_districts())


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a district")
async def create_district(
    body: DistrictCreate, db: DatabaseSession, _admin: AdminPrincipal
) -> DistrictResponse:
    district = await DistrictService(db).create_district(body.name)
    return DistrictResponse(message="District created successfully", data=district)
