from fastapi import APIRouter, status

from nagarkar.api.dependencies import AdminPrincipal
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.api.schemas.taxes import (
    TaxRecordCreate,
    TaxRecordHistoryOut,
    TaxRecordOut,
)
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.taxes import TaxService

router = APIRouter(prefix="/tax", tags=["taxes"])

TaxRecordResponse = SuccessResponse[TaxRecordOut]
TaxHistoryResponse = SuccessResponse[list[TaxRecordHistoryOut]]


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a tax record")
async def create_tax_record(
    body: TaxRecordCreate, db: DatabaseSession, _admin: AdminPrincipal
) -> TaxRecordResponse:
    record = await TaxService(db).create_tax_record(
        body.citizen_id, body.tax_year, body.amount, body.due_date
    )
    return TaxRecordResponse(message="Tax record created successfully", data=record)


@router.get("/{citizen_id}", summary="Tax records of a citizen")
async def list_tax_records(
    citizen_id: int, db: DatabaseSession, _admin: AdminPrincipal
) -> TaxHistoryResponse:
    return TaxHistoryResponse(data=await TaxService(db).list_for_citizen(citizen_id))
