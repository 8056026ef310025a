"""Counter and online payments, gateway callbacks and receipts."""

from typing import Annotated

from fastapi import APIRouter, Header, status

from nagarkar.api.constants import WEBHOOK_SIGNATURE_HEADER
from nagarkar.api.dependencies import (
    CitizenPrincipal,
    CurrentPrincipal,
    PaymentGateway,
)
from nagarkar.api.schemas.common import SuccessResponse
from nagarkar.api.schemas.payments import (
    DirectPaymentOut,
    DirectPaymentRequest,
    OnlinePaymentOut,
    OnlinePaymentRequest,
    PaymentHistoryOut,
    ReceiptOut,
    VerificationOut,
    VerifyPaymentRequest,
    WebhookAck,
    WebhookEvent,
)
from nagarkar.core.security import ensure_citizen_access
from nagarkar.infrastructure.database import DatabaseSession
from nagarkar.services.payments import PaymentService

router = APIRouter(tags=["payments"])

DirectPaymentResponse = SuccessResponse[DirectPaymentOut]
HistoryResponse = SuccessResponse[PaymentHistoryOut]
OnlinePaymentResponse = SuccessResponse[OnlinePaymentOut]
VerificationResponse = SuccessResponse[VerificationOut]
WebhookResponse = SuccessResponse[WebhookAck]
ReceiptResponse = SuccessResponse[ReceiptOut]


@router.post(
    "/payment",
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment of tax plus outstanding penalties",
)
async def create_payment(
    body: DirectPaymentRequest, db: DatabaseSession, principal: CurrentPrincipal
) -> DirectPaymentResponse:
    result = await PaymentService(db).create_direct_payment(
        principal, body.tax_record_id, body.method, body.amount
    )
    return DirectPaymentResponse(message="Payment processed successfully", data=result)


@router.post(
    "/payment/online",
    status_code=status.HTTP_201_CREATED,
    summary="Open a gateway payment session",
)
async def create_online_payment(
    body: OnlinePaymentRequest,
    db: DatabaseSession,
    principal: CitizenPrincipal,
    gateway: PaymentGateway,
) -> OnlinePaymentResponse:
    result = await PaymentService(db, gateway).create_online_payment(
        principal, body.tax_record_id
    )
    return OnlinePaymentResponse(
        message="Payment session created successfully", data=result
    )


@router.post("/payment/verify", summary="Verify a payment with the gateway")
async def verify_payment(
    body: VerifyPaymentRequest, db: DatabaseSession, gateway: PaymentGateway
) -> VerificationResponse:
    result = await PaymentService(db, gateway).verify_payment(
        payment_id=body.payment_id, session_id=body.session_id
    )
    message = (
        "Payment already verified"
        if result.already_verified
        else "Payment verified and completed successfully"
    )
    return VerificationResponse(message=message, data=result)


@router.post("/payment/webhook", summary="Gateway notification receiver")
async def payment_webhook(
    body: WebhookEvent,
    db: DatabaseSession,
    gateway: PaymentGateway,
    signature: Annotated[str | None, Header(alias=WEBHOOK_SIGNATURE_HEADER)] = None,
) -> WebhookResponse:
    applied = await PaymentService(db, gateway).handle_webhook(
        signature, body.event, body.data
    )
    return WebhookResponse(
        message="Webhook processed", data=WebhookAck(applied=applied)
    )


@router.get("/payment/{citizen_id}", summary="Payment history of a citizen")
async def payment_history(
    citizen_id: int, db: DatabaseSession, principal: CurrentPrincipal
) -> HistoryResponse:
    ensure_citizen_access(principal, citizen_id)
    return HistoryResponse(data=await PaymentService(db).get_history(citizen_id))


@router.get("/receipt/{payment_id}", tags=["receipts"], summary="Payment receipt")
async def get_receipt(
    payment_id: int, db: DatabaseSession, principal: CurrentPrincipal
) -> ReceiptResponse:
    receipt = await PaymentService(db).get_receipt(principal, payment_id)
    return ReceiptResponse(data=receipt)
