"""Payments: counter payments, online gateway sessions, settlement and receipts.

Settlement is the single place where money changes the state of a tax
record. It marks the payment COMPLETED, the tax record PAID and every ACTIVE
penalty of that same tax record PAID, all in the caller's transaction.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.config import get_settings
from nagarkar.core.exceptions import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from nagarkar.core.security import Principal, ensure_citizen_access
from nagarkar.domain.enums import PaymentMethod, PaymentStatus, PenaltyStatus, TaxStatus
from nagarkar.domain.identifiers import generate_receipt_number
from nagarkar.infrastructure.database.models import (
    Citizen,
    Payment,
    Penalty,
    TaxRecord,
)
from nagarkar.infrastructure.gateways import (
    PaymentGatewayClient,
    PaymentRequest,
    PaymentResult,
    PaymentSession,
)
from nagarkar.infrastructure.repositories import (
    PaymentRepository,
    PenaltyRepository,
    TaxRecordRepository,
)
from nagarkar.services.common import AmountBreakdown, sum_amounts, utcnow

MAX_RECEIPT_ATTEMPTS = 5

WEBHOOK_COMPLETED = "payment.completed"
WEBHOOK_FAILED = "payment.failed"
WEBHOOK_EXPIRED = "payment.expired"


@dataclass(frozen=True)
class DirectPayment:
    payment: Payment
    breakdown: AmountBreakdown


@dataclass(frozen=True)
class PaymentSummary:
    total_payments: int
    total_amount: Decimal
    online_payments: int
    offline_payments: int


@dataclass(frozen=True)
class PaymentHistory:
    payments: list[Payment]
    payment_summary: PaymentSummary


@dataclass(frozen=True)
class OnlinePayment:
    payment: Payment
    breakdown: AmountBreakdown
    session: PaymentSession


@dataclass(frozen=True)
class Verification:
    payment: Payment
    already_verified: bool


@dataclass(frozen=True)
class Receipt:
    payment: Payment
    citizen: Citizen
    tax_record: TaxRecord
    breakdown: AmountBreakdown
    penalties: list[Penalty]


class PaymentService:
    """Payment operations.

    Args:
        session: Database session of the current unit of work.
        gateway: Payment gateway, needed only for the online flow.
    """

    def __init__(
        self, session: AsyncSession, gateway: PaymentGatewayClient | None = None
    ) -> None:
        self.session = session
        self.gateway = gateway
        self.payments = PaymentRepository(session)
        self.penalties = PenaltyRepository(session)
        self.tax_records = TaxRecordRepository(session)

    def _require_gateway(self) -> PaymentGatewayClient:
        if self.gateway is None:
            msg = "PaymentService was created without a payment gateway"
            raise RuntimeError(msg)
        return self.gateway

    async def _new_receipt_number(self) -> str:
        for _ in range(MAX_RECEIPT_ATTEMPTS):
            receipt_number = generate_receipt_number()
            if not await self.payments.receipt_number_exists(receipt_number):
                return receipt_number
        raise ConflictError("Could not allocate a unique receipt number")

    async def _load_payable(
        self, tax_record_id: int, principal: Principal, forbidden_message: str
    ) -> tuple[TaxRecord, AmountBreakdown]:
        tax_record = await self.tax_records.get_with_history(tax_record_id)
        if tax_record is None:
            raise NotFoundError(
                "Tax record not found", context={"tax_record_id": tax_record_id}
            )
        ensure_citizen_access(principal, tax_record.citizen_id, forbidden_message)
        if tax_record.status == TaxStatus.PAID:
            raise ConflictError(
                "Tax already paid", context={"tax_record_id": tax_record_id}
            )
        return tax_record, AmountBreakdown.for_record(tax_record)

    async def settle(
        self, payment: Payment, result: PaymentResult | None = None
    ) -> Payment:
        """Complete ``payment`` and mark its tax record and penalties paid.

        Raises:
            ConflictError: If the tax record was already paid by another
                payment.
        """
        tax_record = await self.tax_records.get_by_id(payment.tax_record_id)
        if tax_record is None:
            raise NotFoundError(
                "Tax record not found",
                context={"tax_record_id": payment.tax_record_id},
            )
        if tax_record.status == TaxStatus.PAID:
            raise ConflictError(
                "Tax already paid", context={"tax_record_id": tax_record.id}
            )

        now = utcnow()
        payment.status = PaymentStatus.COMPLETED
        payment.payment_date = now
        if result is not None:
            payment.gateway_payment_id = result.payment_id or payment.gateway_payment_id
            payment.gateway_transaction_id = (
                result.transaction_id or payment.gateway_transaction_id
            )
            payment.gateway_response = result.gateway_response

        tax_record.status = TaxStatus.PAID
        tax_record.paid_date = now

        settled = await self.penalties.list_active_for_tax_record(tax_record.id)
        for penalty in settled:
            penalty.status = PenaltyStatus.PAID
            penalty.paid_date = now

        await self.payments.save(payment)
        logger.info(
            "Payment settled",
            payment_id=payment.id,
            tax_record_id=tax_record.id,
            penalties_paid=len(settled),
        )
        return payment

    async def create_direct_payment(
        self,
        principal: Principal,
        tax_record_id: int,
        method: PaymentMethod,
        amount: Decimal,
    ) -> DirectPayment:
        """Record a counter payment that settles the tax record at once.

        Raises:
            ValidationError: If ``amount`` differs from tax plus active
                penalties. The expected amount and breakdown are attached.
        """
        tax_record, breakdown = await self._load_payable(
            tax_record_id, principal, "Access denied"
        )
        if amount != breakdown.total_amount:
            raise ValidationError(
                "Payment amount mismatch",
                error_code=ErrorCode.AMOUNT_MISMATCH,
                context={
                    "expected_amount": float(breakdown.total_amount),
                    "breakdown": breakdown.as_context(),
                },
            )

        payment = await self.payments.create(
            Payment(
                tax_record_id=tax_record.id,
                citizen_id=tax_record.citizen_id,
                amount=amount,
                method=method,
                status=PaymentStatus.PENDING,
                receipt_number=await self._new_receipt_number(),
                payment_date=utcnow(),
            )
        )
        await self.settle(payment)
        return DirectPayment(payment=payment, breakdown=breakdown)

    async def get_history(self, citizen_id: int) -> PaymentHistory:
        payments = await self.payments.list_for_citizen(citizen_id)
        if not payments:
            raise NotFoundError(
                "No payment history found", context={"citizen_id": citizen_id}
            )

        completed = [p for p in payments if p.status == PaymentStatus.COMPLETED]
        summary = PaymentSummary(
            total_payments=len(payments),
            total_amount=sum((p.amount for p in completed), Decimal(0)),
            online_payments=sum(
                1 for p in payments if p.method == PaymentMethod.ONLINE
            ),
            offline_payments=sum(
                1 for p in payments if p.method == PaymentMethod.OFFLINE
            ),
        )
        return PaymentHistory(payments=payments, payment_summary=summary)

    async def create_online_payment(
        self, principal: Principal, tax_record_id: int
    ) -> OnlinePayment:
        """Open a gateway session and record a PENDING online payment."""
        gateway = self._require_gateway()
        tax_record, breakdown = await self._load_payable(
            tax_record_id, principal, "Unauthorized access to tax record"
        )
        citizen = tax_record.citizen

        session = await gateway.create_session(
            PaymentRequest(
                amount=breakdown.total_amount,
                currency=get_settings().gateway_config.currency,
                description=(
                    f"Property tax {tax_record.tax_year} - {citizen.customer_id}"
                ),
                customer_name=citizen.name,
                customer_phone=citizen.contact_no,
                customer_email=citizen.email,
                metadata={"tax_record_id": tax_record.id, "citizen_id": citizen.id},
            )
        )
        payment = await self.payments.create(
            Payment(
                tax_record_id=tax_record.id,
                citizen_id=citizen.id,
                amount=breakdown.total_amount,
                method=PaymentMethod.ONLINE,
                status=PaymentStatus.PENDING,
                receipt_number=await self._new_receipt_number(),
                payment_date=utcnow(),
                gateway_session_id=session.session_id,
                expires_at=session.expires_at,
            )
        )
        logger.info(
            "Online payment session created",
            payment_id=payment.id,
            session_id=session.session_id,
        )
        return OnlinePayment(payment=payment, breakdown=breakdown, session=session)

    async def _find(
        self, payment_id: int | None, session_id: str | None
    ) -> Payment | None:
        if session_id:
            return await self.payments.get_by_session_id(session_id)
        if payment_id is not None:
            return await self.payments.get_by_id(payment_id)
        return None

    async def verify_payment(
        self, payment_id: int | None = None, session_id: str | None = None
    ) -> Verification:
        """Confirm a payment with the gateway and settle it.

        A COMPLETED payment is returned untouched. A failed verification is
        committed as FAILED before the error is raised.

        Raises:
            NotFoundError: If no payment matches.
            ValidationError: If the gateway does not confirm the payment.
        """
        gateway = self._require_gateway()
        payment = await self._find(payment_id, session_id)
        if payment is None:
            raise NotFoundError(
                "Payment record not found",
                context={"payment_id": payment_id, "session_id": session_id},
            )
        if payment.status == PaymentStatus.COMPLETED:
            return Verification(payment=payment, already_verified=True)

        reference = (
            payment.gateway_payment_id
            or payment.gateway_session_id
            or payment.receipt_number
        )
        result = await gateway.verify(reference)
        if result.success and result.status == "completed":
            await self.settle(payment, result)
            return Verification(payment=payment, already_verified=False)

        payment.status = PaymentStatus.FAILED
        payment.gateway_response = {"error": result.error}
        await self.session.commit()
        logger.warning("Payment verification failed", payment_id=payment.id)
        raise ValidationError(
            "Payment verification failed",
            error_code=ErrorCode.PAYMENT_FAILED,
            context={"payment_id": payment.id, "error": result.error},
        )

    async def handle_webhook(
        self, signature: str | None, event: str, data: dict[str, Any]
    ) -> bool:
        """Apply a gateway notification.

        Only PENDING payments change state; anything else is acknowledged
        without effect.

        Returns:
            bool: Whether the event changed a payment.

        Raises:
            UnauthorizedError: If the signature does not match.
        """
        if not self._require_gateway().verify_webhook_signature(signature):
            raise UnauthorizedError("Invalid webhook signature")

        if event not in (WEBHOOK_COMPLETED, WEBHOOK_FAILED, WEBHOOK_EXPIRED):
            logger.info("Unhandled webhook event: {}", event)
            return False

        session_id = data.get("session_id")
        payment = None
        if session_id:
            payment = await self.payments.get_by_session_id(session_id)
        if payment is None or payment.status != PaymentStatus.PENDING:
            logger.info("Webhook {} ignored", event, session_id=session_id)
            return False

        if event == WEBHOOK_COMPLETED:
            await self.settle(
                payment,
                PaymentResult(
                    success=True,
                    status="completed",
                    payment_id=data.get("payment_id"),
                    transaction_id=data.get("transaction_id"),
                    gateway_response=data,
                ),
            )
        else:
            payment.status = (
                PaymentStatus.FAILED
                if event == WEBHOOK_FAILED
                else PaymentStatus.EXPIRED
            )
            payment.gateway_response = data
            await self.payments.save(payment)

        logger.info("Webhook {} applied", event, payment_id=payment.id)
        return True

    async def get_receipt(self, principal: Principal, payment_id: int) -> Receipt:
        """Receipt of a completed payment with the penalties it paid."""
        payment = await self.payments.get_by_id(payment_id)
        if payment is None or payment.status != PaymentStatus.COMPLETED:
            raise NotFoundError("Receipt not found", context={"payment_id": payment_id})
        ensure_citizen_access(principal, payment.citizen_id)

        tax_record = payment.tax_record
        penalties = await self.penalties.list_paid_for_tax_record(tax_record.id)
        penalty_amount = sum_amounts(penalties)
        breakdown = AmountBreakdown(
            tax_amount=tax_record.amount,
            penalty_amount=penalty_amount,
            total_amount=payment.amount,
        )
        return Receipt(
            payment=payment,
            citizen=payment.citizen,
            tax_record=tax_record,
            breakdown=breakdown,
            penalties=penalties,
        )
