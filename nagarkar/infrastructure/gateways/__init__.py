"""Outbound integrations: SMS delivery and the online payment gateway.

Both ship with mock implementations that simulate latency and a configurable
success rate. Real providers implement the same abstract clients.
"""

from nagarkar.infrastructure.gateways.payment import (
    MockPaymentGateway,
    PaymentGatewayClient,
    PaymentRequest,
    PaymentResult,
    PaymentSession,
    get_payment_gateway,
)
from nagarkar.infrastructure.gateways.sms import (
    MockSmsClient,
    SmsClient,
    SmsResult,
    get_sms_client,
)

__all__ = [
    "MockPaymentGateway",
    "MockSmsClient",
    "PaymentGatewayClient",
    "PaymentRequest",
    "PaymentResult",
    "PaymentSession",
    "SmsClient",
    "SmsResult",
    "get_payment_gateway",
    "get_sms_client",
]
