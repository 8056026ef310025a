"""Error response schema shared by every failing endpoint.

``error`` is the human readable message; ``error_code`` is the stable
identifier clients should branch on. ``details`` carries the exception
context, e.g. the expected amount and breakdown of a payment mismatch or
field messages of a rejected request body.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceInfo(BaseModel):
    """Service that produced the error."""

    name: str = Field(..., description="Name of the service", examples=["Nagarkar"])
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "Payment amount mismatch",
                    "error_code": "AMOUNT_MISMATCH",
                    "details": {
                        "expected_amount": 5100.0,
                        "breakdown": {
                            "tax_amount": 5000.0,
                            "penalty_amount": 100.0,
                            "total_amount": 5100.0,
                        },
                    },
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2024-06-14T12:00:00+00:00",
                    "severity": "LOW",
                    "service_info": {
                        "name": "Nagarkar",
                        "version": "0.1.0",
                        "environment": "production",
                    },
                },
                {
                    "error": "Tax already paid",
                    "error_code": "CONFLICT",
                    "details": {"tax_record_id": 12},
                    "timestamp": "2024-06-14T12:00:01+00:00",
                    "severity": "LOW",
                },
                {
                    "error": "Invalid or expired token",
                    "error_code": "UNAUTHORIZED",
                    "timestamp": "2024-06-14T12:00:02+00:00",
                    "severity": "MEDIUM",
                },
            ]
        }
    )

    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Citizen not found", "Invalid credentials"],
    )
    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "CONFLICT"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details such as field validation messages",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this request",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the error occurred (with timezone)",
    )
    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
    )
    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )
    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Stack trace and context, only in development",
    )
