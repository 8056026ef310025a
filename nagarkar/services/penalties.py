"""Penalty application, listing and rule management."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal, TypeAlias

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.config import PenaltyConfig
from nagarkar.core.exceptions import ConflictError, NotFoundError
from nagarkar.domain.enums import PenaltyStatus, TaxStatus
from nagarkar.domain.penalties import (
    PenaltyCalculation,
    PenaltyCalculator,
    PenaltyRule,
    RuleSelection,
    format_amount,
)
from nagarkar.infrastructure.database.models import Citizen, Penalty, TaxRecord
from nagarkar.infrastructure.repositories import (
    CitizenRepository,
    PenaltyRepository,
    TaxRecordRepository,
)
from nagarkar.services.common import (
    active_penalties,
    local_today,
    sum_amounts,
    utcnow,
)

CENT = Decimal("0.01")

AutoPenaltyStatus: TypeAlias = Literal["applied", "calculated", "skipped", "error"]


@dataclass(frozen=True)
class AutoPenaltyOutcome:
    """What auto calculation did with one overdue tax record."""

    citizen_id: int
    citizen_name: str
    tax_record_id: int
    tax_year: int
    tax_amount: Decimal
    status: AutoPenaltyStatus
    reason: str | None = None
    existing_penalty: Decimal | None = None
    penalty_amount: Decimal | None = None
    days_overdue: int | None = None
    applied_rule: str | None = None
    calculation: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class AutoPenaltyRun:
    total_records_processed: int
    penalties_applied: int
    total_penalty_amount: Decimal
    dry_run: bool
    results: list[AutoPenaltyOutcome]


@dataclass(frozen=True)
class PenaltySummary:
    total_penalties: int
    active_penalties: int
    paid_penalties: int
    waived_penalties: int
    total_penalty_amount: Decimal


@dataclass(frozen=True)
class CitizenPenalties:
    citizen: Citizen
    penalty_summary: PenaltySummary
    penalties: list[Penalty]


def build_calculator(config: PenaltyConfig) -> PenaltyCalculator:
    """Build a calculator from the configured rules and selection policy."""
    return PenaltyCalculator(
        [PenaltyRule.model_validate(rule.model_dump()) for rule in config.rules],
        RuleSelection(config.rule_selection),
    )


def overdue_reason(rule: PenaltyRule) -> str:
    return f"Overdue tax payment - {rule.name}"


def new_penalty(
    tax_record: TaxRecord, calculation: PenaltyCalculation, reason: str
) -> Penalty:
    """Build an ACTIVE penalty from a rule evaluation."""
    return Penalty(
        tax_record_id=tax_record.id,
        citizen_id=tax_record.citizen_id,
        amount=calculation.penalty_amount,
        reason=reason,
        status=PenaltyStatus.ACTIVE,
        days_overdue=calculation.days_overdue,
        calculation=calculation.calculation,
        applied_date=utcnow(),
    )


class PenaltyService:
    """Penalty operations backed by a shared rule calculator."""

    def __init__(self, session: AsyncSession, calculator: PenaltyCalculator) -> None:
        self.calculator = calculator
        self.citizens = CitizenRepository(session)
        self.penalties = PenaltyRepository(session)
        self.tax_records = TaxRecordRepository(session)

    async def apply_manual_penalties(
        self, tax_record_ids: Sequence[int], percentage: Decimal
    ) -> list[Penalty]:
        """Charge ``percentage`` of the tax on each eligible record.

        Eligible records are unpaid and carry no ACTIVE penalty. Each one is
        marked OVERDUE.

        Raises:
            NotFoundError: If none of the records is eligible.
        """
        records = await self.tax_records.list_without_active_penalty(tax_record_ids)
        if not records:
            raise NotFoundError(
                "No eligible tax records found",
                context={"tax_record_ids": list(tax_record_ids)},
            )

        created = []
        label = format_amount(percentage)
        for record in records:
            amount = (record.amount * percentage / 100).quantize(
                CENT, rounding=ROUND_HALF_UP
            )
            penalty = await self.penalties.create(
                Penalty(
                    tax_record_id=record.id,
                    citizen_id=record.citizen_id,
                    amount=amount,
                    reason=f"Manual penalty - {label}% of tax amount",
                    status=PenaltyStatus.ACTIVE,
                    calculation=f"{label}% of {format_amount(record.amount)}",
                    applied_date=utcnow(),
                )
            )
            record.status = TaxStatus.OVERDUE
            created.append(penalty)

        await self.tax_records.session.flush()
        logger.info("Manual penalties applied", count=len(created))
        return created

    async def list_for_citizen(self, citizen_id: int) -> CitizenPenalties:
        citizen = await self.citizens.get_by_id(citizen_id)
        if citizen is None:
            raise NotFoundError("Citizen not found", context={"citizen_id": citizen_id})

        penalties = await self.penalties.list_for_citizen(citizen_id)
        if not penalties:
            raise NotFoundError(
                "No penalties found", context={"citizen_id": citizen_id}
            )

        by_status = {
            status: [p for p in penalties if p.status == status]
            for status in PenaltyStatus
        }
        summary = PenaltySummary(
            total_penalties=len(penalties),
            active_penalties=len(by_status[PenaltyStatus.ACTIVE]),
            paid_penalties=len(by_status[PenaltyStatus.PAID]),
            waived_penalties=len(by_status[PenaltyStatus.WAIVED]),
            total_penalty_amount=sum_amounts(by_status[PenaltyStatus.ACTIVE]),
        )
        return CitizenPenalties(
            citizen=citizen, penalty_summary=summary, penalties=penalties
        )

    async def auto_calculate(
        self,
        dry_run: bool = False,
        citizen_ids: Sequence[int] = (),
        today: date | None = None,
    ) -> AutoPenaltyRun:
        """Evaluate the rules against every overdue record.

        Records that already carry an ACTIVE penalty, or that are still
        within every grace period, are skipped. Unless ``dry_run`` is set the
        computed penalties are stored and the records marked OVERDUE.
        """
        today = today or local_today()
        records = await self.tax_records.list_overdue(today, citizen_ids or None)

        results: list[AutoPenaltyOutcome] = []
        applied = 0
        total = Decimal(0)
        for record in records:
            base = {
                "citizen_id": record.citizen_id,
                "citizen_name": record.citizen.name,
                "tax_record_id": record.id,
                "tax_year": record.tax_year,
                "tax_amount": record.amount,
            }
            if existing := active_penalties(record):
                results.append(
                    AutoPenaltyOutcome(
                        **base,
                        status="skipped",
                        reason="Penalty already exists",
                        existing_penalty=existing[0].amount,
                    )
                )
                continue

            try:
                calculation = self.calculator.calculate_penalty(
                    record.amount, record.due_date, today
                )
            except ArithmeticError as e:
                logger.exception("Penalty calculation failed", tax_record_id=record.id)
                results.append(AutoPenaltyOutcome(**base, status="error", error=str(e)))
                continue

            if calculation is None:
                results.append(
                    AutoPenaltyOutcome(
                        **base, status="skipped", reason="Still within grace period"
                    )
                )
                continue

            if not dry_run:
                reason = overdue_reason(calculation.applied_rule)
                self.penalties.session.add(new_penalty(record, calculation, reason))
                record.status = TaxStatus.OVERDUE

            results.append(
                AutoPenaltyOutcome(
                    **base,
                    status="calculated" if dry_run else "applied",
                    penalty_amount=calculation.penalty_amount,
                    days_overdue=calculation.days_overdue,
                    applied_rule=calculation.applied_rule.name,
                    calculation=calculation.calculation,
                )
            )
            applied += 1
            total += calculation.penalty_amount

        if not dry_run:
            await self.penalties.session.flush()

        logger.info(
            "Auto penalty calculation finished",
            processed=len(records),
            applied=applied,
            dry_run=dry_run,
        )
        return AutoPenaltyRun(
            total_records_processed=len(records),
            penalties_applied=applied,
            total_penalty_amount=total,
            dry_run=dry_run,
            results=results,
        )

    def get_rules(self) -> list[PenaltyRule]:
        return self.calculator.get_rules()

    def update_rules(self, rules: Sequence[PenaltyRule]) -> list[PenaltyRule]:
        self.calculator.update_rules(rules)
        logger.info("Penalty rules updated", rule_ids=[r.id for r in rules])
        return self.calculator.get_rules()

    def simulate(
        self, tax_amount: Decimal, due_date: date, current_date: date | None = None
    ) -> PenaltyCalculation | None:
        return self.calculator.calculate_penalty(tax_amount, due_date, current_date)

    async def waive(self, penalty_id: int) -> Penalty:
        """Waive an ACTIVE penalty.

        Raises:
            NotFoundError: If the penalty does not exist.
            ConflictError: If the penalty is already paid or waived.
        """
        penalty = await self.penalties.get_by_id(penalty_id)
        if penalty is None:
            raise NotFoundError("Penalty not found", context={"penalty_id": penalty_id})
        if penalty.status != PenaltyStatus.ACTIVE:
            raise ConflictError(
                "Only active penalties can be waived",
                context={"penalty_id": penalty_id, "status": penalty.status.value},
            )

        penalty.status = PenaltyStatus.WAIVED
        await self.penalties.save(penalty)
        logger.info("Penalty waived", penalty_id=penalty_id)
        return penalty
