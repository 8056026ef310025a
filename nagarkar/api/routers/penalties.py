"""Penalties: manual and automatic application, rules and simulation.

The fixed paths are registered before ``/penalty/{citizen_id}`` so they are
not captured by it.
"""

from fastapi import APIRouter, status

from nagarkar.api.dependencies import AdminPrincipal, Calculator, CurrentPrincipal
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.api.schemas.penalties import (
    AutoCalculateRequest,
    AutoPenaltyRunOut,
    CitizenPenaltiesOut,
    ManualPenaltyRequest,
    PenaltyCalculationOut,
    PenaltyOut,
    PenaltyRuleOut,
    RulesUpdateRequest,
    SimulateRequest,
)
from nagarkar.core.config import get_settings
from nagarkar.core.security import ensure_citizen_access
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.penalties import PenaltyService

router = APIRouter(prefix="/penalty", tags=["penalties"])

RulesResponse = SuccessResponse[list[PenaltyRuleOut]]
SimulationResponse = SuccessResponse[PenaltyCalculationOut | None]
AutoRunResponse = SuccessResponse[AutoPenaltyRunOut]
PenaltyListResponse = SuccessResponse[list[PenaltyOut]]
CitizenPenaltiesResponse = SuccessResponse[CitizenPenaltiesOut]
PenaltyResponse = SuccessResponse[PenaltyOut]


@router.get("/rules", summary="Current penalty rules")
async def get_rules(
    db: DatabaseSession, calculator: Calculator, _admin: AdminPrincipal
) -> RulesResponse:
    return RulesResponse(data=PenaltyService(db, calculator).get_rules())


@router.put("/rules", summary="Replace the penalty rules")
async def update_rules(
    body: RulesUpdateRequest,
    db: DatabaseSession,
    calculator: Calculator,
    _admin: AdminPrincipal,
) -> RulesResponse:
    rules = PenaltyService(db, calculator).update_rules(body.rules)
    return RulesResponse(message="Penalty rules updated successfully", data=rules)


@router.post("/simulate", summary="Compute a penalty without storing it")
async def simulate(
    body: SimulateRequest,
    db: DatabaseSession,
    calculator: Calculator,
    _admin: AdminPrincipal,
) -> SimulationResponse:
    calculation = PenaltyService(db, calculator).simulate(
        body.tax_amount, body.due_date, body.current_date
    )
    if calculation is None:
        return SimulationResponse(
            message="No penalty applicable - not overdue or within grace period",
            data=None,
        )
    return SimulationResponse(message="Penalty calculation completed", data=calculation)


@router.post("/auto-calculate", summary="Apply the rules to overdue tax records")
async def auto_calculate(
    body: AutoCalculateRequest,
    db: DatabaseSession,
    calculator: Calculator,
    _admin: AdminPrincipal,
) -> AutoRunResponse:
    run = await PenaltyService(db, calculator).auto_calculate(
        dry_run=body.dry_run, citizen_ids=body.citizen_ids
    )
    if run.dry_run:
        message = (
            "Penalty calculation completed (dry run): "
            f"{run.penalties_applied} penalties calculated"
        )
    else:
        message = (
            "Auto-penalty application completed: "
            f"{run.penalties_applied} penalties applied"
        )
    return AutoRunResponse(message=message, data=run)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Charge a percentage penalty on tax records",
)
async def apply_penalties(
    body: ManualPenaltyRequest,
    db: DatabaseSession,
    calculator: Calculator,
    _admin: AdminPrincipal,
) -> PenaltyListResponse:
    percentage = body.percentage or get_settings().penalty_config.manual_percentage
    penalties = await PenaltyService(db, calculator).apply_manual_penalties(
        body.tax_record_ids, percentage
    )
    return PenaltyListResponse(
        message=f"Penalties added for {len(penalties)} tax records", data=penalties
    )


@router.get("/{citizen_id}", summary="Penalties of a citizen")
async def list_penalties(
    citizen_id: int,
    db: DatabaseSession,
    calculator: Calculator,
    principal: CurrentPrincipal,
) -> CitizenPenaltiesResponse:
    ensure_citizen_access(principal, citizen_id)
    result = await PenaltyService(db, calculator).list_for_citizen(citizen_id)
    return CitizenPenaltiesResponse(data=result)


@router.post("/{penalty_id}/waive", summary="Waive an active penalty")
async def waive_penalty(
    penalty_id: int,
    db: DatabaseSession,
    calculator: Calculator,
    _admin: AdminPrincipal,
) -> PenaltyResponse:
    penalty = await PenaltyService(db, calculator).waive(penalty_id)
    return PenaltyResponse(message="Penalty waived successfully", data=penalty)
