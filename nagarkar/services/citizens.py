"""Citizen registration, listing and tax details."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.exceptions import ConflictError, NotFoundError
from nagarkar.domain.enums import PaymentStatus, TaxStatus
from nagarkar.domain.identifiers import generate_customer_id
from nagarkar.infrastructure.database.models import Citizen, Payment
from nagarkar.infrastructure.repositories import (
    CitizenRepository,
    DistrictRepository,
)
from nagarkar.services.common import (
    active_penalties,
    days_overdue,
    is_overdue,
    local_today,
    sum_amounts,
)

MAX_CUSTOMER_ID_ATTEMPTS = 5


@dataclass(frozen=True)
class CitizenListing:
    citizen: Citizen
    tax_records_count: int
    payments_count: int


@dataclass(frozen=True)
class TaxSummary:
    total_tax_amount: Decimal
    total_paid_amount: Decimal
    total_pending_amount: Decimal
    total_penalties: Decimal
    total_records: int
    paid_records: int
    pending_records: int


@dataclass(frozen=True)
class TaxRecordStatus:
    """A tax record with its overdue state and outstanding penalty."""

    id: int
    tax_year: int
    amount: Decimal
    due_date: date
    status: TaxStatus
    is_overdue: bool
    days_overdue: int
    penalty_amount: Decimal
    last_payment: Payment | None


@dataclass(frozen=True)
class CitizenTaxDetails:
    citizen: Citizen
    tax_summary: TaxSummary
    tax_records: list[TaxRecordStatus]


class CitizenService:
    def __init__(self, session: AsyncSession) -> None:
        self.citizens = CitizenRepository(session)
        self.districts = DistrictRepository(session)

    async def list_citizens(
        self, search: str | None = None, district_id: int | None = None
    ) -> list[CitizenListing]:
        rows = await self.citizens.search(search=search, district_id=district_id)
        return [CitizenListing(*row) for row in rows]

    async def _new_customer_id(self) -> str:
        for _ in range(MAX_CUSTOMER_ID_ATTEMPTS):
            customer_id = generate_customer_id()
            if not await self.citizens.customer_id_exists(customer_id):
                return customer_id
        raise ConflictError("Could not allocate a unique customer ID")

    async def register_citizen(
        self,
        *,
        name: str,
        ward_no: str,
        district_id: int,
        city: str,
        state: str,
        contact_no: str,
        email: str | None = None,
    ) -> Citizen:
        """Register a citizen under a freshly generated customer ID.

        Raises:
            NotFoundError: If the district does not exist.
        """
        if not await self.districts.exists(district_id):
            raise NotFoundError(
                "District not found", context={"district_id": district_id}
            )

        citizen = await self.citizens.create(
            Citizen(
                customer_id=await self._new_customer_id(),
                name=name,
                ward_no=ward_no,
                district_id=district_id,
                city=city,
                state=state,
                contact_no=contact_no,
                email=email,
            )
        )
        logger.info(
            "Citizen registered",
            citizen_id=citizen.id,
            customer_id=citizen.customer_id,
        )
        return citizen

    async def get_tax_details(
        self, citizen_id: int, today: date | None = None
    ) -> CitizenTaxDetails:
        """A citizen's tax records with totals and per record overdue state."""
        today = today or local_today()
        citizen = await self.citizens.get_with_history(citizen_id)
        if citizen is None:
            raise NotFoundError("Citizen not found", context={"citizen_id": citizen_id})

        records = sorted(citizen.tax_records, key=lambda r: r.tax_year, reverse=True)
        paid = [r for r in records if r.status == TaxStatus.PAID]
        unpaid = [r for r in records if r.status != TaxStatus.PAID]

        statuses = []
        total_penalties = Decimal(0)
        for record in records:
            penalty_amount = sum_amounts(active_penalties(record))
            total_penalties += penalty_amount
            completed = sorted(
                (p for p in record.payments if p.status == PaymentStatus.COMPLETED),
                key=lambda p: p.id,
                reverse=True,
            )
            statuses.append(
                TaxRecordStatus(
                    id=record.id,
                    tax_year=record.tax_year,
                    amount=record.amount,
                    due_date=record.due_date,
                    status=record.status,
                    is_overdue=is_overdue(record, today),
                    days_overdue=days_overdue(record, today),
                    penalty_amount=penalty_amount,
                    last_payment=completed[0] if completed else None,
                )
            )

        summary = TaxSummary(
            total_tax_amount=sum_amounts(records),
            total_paid_amount=sum_amounts(paid),
            total_pending_amount=sum_amounts(unpaid),
            total_penalties=total_penalties,
            total_records=len(records),
            paid_records=len(paid),
            pending_records=len(unpaid),
        )
        return CitizenTaxDetails(
            citizen=citizen, tax_summary=summary, tax_records=statuses
        )
