"""Login and token verification."""

from fastapi import APIRouter

from nagarkar.api.schemas.auth import (
    AdminLoginOut,
    AdminLoginRequest,
    CitizenLoginOut,
    CitizenLoginRequest,
    TokenVerifyRequest,
    VerifiedAdmin,
    VerifiedCitizen,
)
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.infrastructure.database.models import Admin
from nagarkar.services.auth import AuthService

router = APIRouter(tags=["auth"])

AdminLoginResponse = SuccessResponse[AdminLoginOut]
CitizenLoginResponse = SuccessResponse[CitizenLoginOut]
VerifyResponse = SuccessResponse[VerifiedAdmin | VerifiedCitizen]


@router.post("/admin/login", summary="Admin login")
async def admin_login(
    body: AdminLoginRequest, db: DatabaseSession
) -> AdminLoginResponse:
    token, admin = await AuthService(db).login_admin(body.username, body.password)
    return AdminLoginResponse(
        message="Admin login successful",
        data=AdminLoginOut(token=token, admin=admin),
    )


@router.post("/citizen/login", summary="Citizen login with customer ID")
async def citizen_login(
    body: CitizenLoginRequest, db: DatabaseSession
) -> CitizenLoginResponse:
    token, citizen = await AuthService(db).login_citizen(body.customer_id)
    return CitizenLoginResponse(
        message="Citizen login successful",
        data=CitizenLoginOut(token=token, citizen=citizen),
    )


@router.post("/auth/verify", summary="Resolve a token to its account")
async def verify_token(body: TokenVerifyRequest, db: DatabaseSession) -> VerifyResponse:
    account = await AuthService(db).verify_token(body.token)
    if isinstance(account, Admin):
        return VerifyResponse(data=VerifiedAdmin(user=account))
    return VerifyResponse(data=VerifiedCitizen(user=account))
