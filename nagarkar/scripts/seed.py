"""Seed a development database with an admin, districts, citizens and taxes.

Run with ``python -m nagarkar.scripts.seed``. Existing rows are left alone,
so the script can be run repeatedly.
"""

import asyncio
from datetime import date
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.config import get_settings
from nagarkar.core.logging import setup_logging
from nagarkar.core.security import hash_password
from nagarkar.domain.enums import PaymentMethod, PaymentStatus, TaxStatus
from nagarkar.domain.identifiers import generate_receipt_number
from nagarkar.infrastructure.database.models import (
    Admin,
    Citizen,
    District,
    Payment,
    TaxRecord,
)
from nagarkar.infrastructure.database.session import (
    close_database,
    create_tables,
    get_async_session,
)
from nagarkar.infrastructure.repositories import (
    AdminRepository,
    CitizenRepository,
    DistrictRepository,
    TaxRecordRepository,
)
from nagarkar.services.common import local_today, utcnow

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"  # noqa: S105
DISTRICT_NAMES = ("Central District", "North District", "South District")
CITIZENS = (
    {
        "customer_id": "CID001001",
        "name": "John Doe",
        "ward_no": "Ward-1",
        "district": "Central District",
        "contact_no": "9876543210",
        "tax_amount": Decimal(5000),
        "paid": False,
    },
    {
        "customer_id": "CID001002",
        "name": "Jane Smith",
        "ward_no": "Ward-2",
        "district": "North District",
        "contact_no": "9876543211",
        "tax_amount": Decimal(7500),
        "paid": True,
    },
)


async def _seed_admin(session: AsyncSession) -> None:
    repo = AdminRepository(session)
    if await repo.get_by_username(ADMIN_USERNAME) is None:
        await repo.create(
            Admin(username=ADMIN_USERNAME, password_hash=hash_password(ADMIN_PASSWORD))
        )


async def _seed_districts(session: AsyncSession) -> dict[str, District]:
    repo = DistrictRepository(session)
    districts = {}
    for name in DISTRICT_NAMES:
        district = await repo.get_by_name(name)
        districts[name] = district or await repo.create(District(name=name))
    return districts


async def _seed_citizens(
    session: AsyncSession, districts: dict[str, District]
) -> int:
    citizens = CitizenRepository(session)
    tax_records = TaxRecordRepository(session)
    year = local_today().year
    created = 0

    for data in CITIZENS:
        citizen = await citizens.get_by_customer_id(data["customer_id"])
        if citizen is None:
            citizen = await citizens.create(
                Citizen(
                    customer_id=data["customer_id"],
                    name=data["name"],
                    ward_no=data["ward_no"],
                    district_id=districts[data["district"]].id,
                    city="Mumbai",
                    state="Maharashtra",
                    contact_no=data["contact_no"],
                )
            )

        if await tax_records.get_for_citizen_year(citizen.id, year) is not None:
            continue

        record = await tax_records.create(
            TaxRecord(
                citizen_id=citizen.id,
                tax_year=year,
                amount=data["tax_amount"],
                due_date=date(year, 12, 31),
                status=TaxStatus.PAID if data["paid"] else TaxStatus.PENDING,
                paid_date=utcnow() if data["paid"] else None,
            )
        )
        created += 1
        if data["paid"]:
            session.add(
                Payment(
                    tax_record_id=record.id,
                    citizen_id=citizen.id,
                    amount=record.amount,
                    method=PaymentMethod.ONLINE,
                    status=PaymentStatus.COMPLETED,
                    receipt_number=generate_receipt_number(),
                    payment_date=utcnow(),
                )
            )
    return created


async def seed() -> None:
    """Create the tables if needed and insert the sample data."""
    try:
        await create_tables()
        async with get_async_session() as session:
            await _seed_admin(session)
            districts = await _seed_districts(session)
            created = await _seed_citizens(session, districts)
    finally:
        await close_database()

    logger.info(
        "Database seeded",
        admin=ADMIN_USERNAME,
        districts=len(districts),
        tax_records_created=created,
    )


def main() -> None:
    setup_logging(get_settings())
    asyncio.run(seed())


if __name__ == "__main__":
    main()
