"""FastAPI dependencies for authentication and shared collaborators.

Routers declare what they need through the ``Annotated`` aliases below, and
tests swap implementations with ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from nagarkar.core.config import get_settings
from nagarkar.core.context import RequestContext
from nagarkar.core.exceptions import ForbiddenError, UnauthorizedError
from nagarkar.core.security import Principal, decode_access_token
from nagarkar.domain.penalties import PenaltyCalculator
from nagarkar.infrastructure.gateways import (
    PaymentGatewayClient,
    SmsClient,
    get_payment_gateway,
    get_sms_client,
)
from nagarkar.services.penalties import build_calculator

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Principal:
    """Authenticate the bearer token of the request.

    Raises:
        UnauthorizedError: If no token is sent or it is invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")

    principal = decode_access_token(credentials.credentials)
    RequestContext.set_principal(principal.label)
    request.state.principal = principal.label
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: CurrentPrincipal) -> Principal:
    if not principal.is_admin:
        raise ForbiddenError(
            "Admin access required", context={"principal": principal.label}
        )
    return principal


async def require_citizen(principal: CurrentPrincipal) -> Principal:
    if principal.role != "citizen":
        raise ForbiddenError(
            "Citizen access required", context={"principal": principal.label}
        )
    return principal


AdminPrincipal = Annotated[Principal, Depends(require_admin)]
CitizenPrincipal = Annotated[Principal, Depends(require_citizen)]


@lru_cache
def get_penalty_calculator() -> PenaltyCalculator:
    """Process-wide calculator built from the configured rules.

    Rules replaced through the API live in this instance until restart.
    """
    return build_calculator(get_settings().penalty_config)


Calculator = Annotated[PenaltyCalculator, Depends(get_penalty_calculator)]
Sms = Annotated[SmsClient, Depends(get_sms_client)]
PaymentGateway = Annotated[PaymentGatewayClient, Depends(get_payment_gateway)]
