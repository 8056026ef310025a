from datetime import date
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.exceptions import ConflictError, NotFoundError
from nagarkar.domain.enums import TaxStatus
from nagarkar.infrastructure.database.models import TaxRecord
from nagarkar.infrastructure.repositories import (
    CitizenRepository,
    TaxRecordRepository,
)


class TaxService:
    def __init__(self, session: AsyncSession) -> None:
        self.citizens = CitizenRepository(session)
        self.tax_records = TaxRecordRepository(session)

    async def create_tax_record(
        self, citizen_id: int, tax_year: int, amount: Decimal, due_date: date
    ) -> TaxRecord:
        """Bill a citizen for one year.

        Raises:
            NotFoundError: If the citizen does not exist.
            ConflictError: If the citizen already has a record for the year.
        """
        if not await self.citizens.exists(citizen_id):
            raise NotFoundError("Citizen not found", context={"citizen_id": citizen_id})

        if await self.tax_records.get_for_citizen_year(citizen_id, tax_year):
            raise ConflictError(
                "Tax record already exists for this year",
                context={"citizen_id": citizen_id, "tax_year": tax_year},
            )

        record = await self.tax_records.create(
            TaxRecord(
                citizen_id=citizen_id,
                tax_year=tax_year,
                amount=amount,
                due_date=due_date,
                status=TaxStatus.PENDING,
            )
        )
        logger.info(
            "Tax record created",
            tax_record_id=record.id,
            citizen_id=citizen_id,
            tax_year=tax_year,
        )
        return record

    async def list_for_citizen(self, citizen_id: int) -> list[TaxRecord]:
        """A citizen's tax records with payments and penalties, latest year first."""
        records = await self.tax_records.list_for_citizen(citizen_id)
        if not records:
            raise NotFoundError(
                "No tax records found for this citizen",
                context={"citizen_id": citizen_id},
            )
        return records
