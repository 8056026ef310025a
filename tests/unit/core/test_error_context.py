"""Unit tests for sanitization of logged data."""

import pytest

from nagarkar.core.constants import REDACTED
from nagarkar.core.error_context import (
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
    sanitize_sql_params,
)
from nagarkar.core.exceptions import UnauthorizedError


@pytest.mark.unit
class TestSanitization:
    def test_nested_secrets_are_redacted(self) -> None:
        data = {
            "username": "admin",
            "password": "admin123",
            "payload": {"token": "abc", "items": [{"api_key": "k"}]},
        }

        result = sanitize_dict(data)

        assert result == {
            "username": "admin",
            "password": REDACTED,
            "payload": {"token": REDACTED, "items": [{"api_key": REDACTED}]},
        }
        assert data["password"] == "admin123"

    def test_headers(self) -> None:
        headers = {
            "Authorization": "Bearer x",
            "X-Webhook-Signature": "sig",
            "Accept": "application/json",
        }

        assert sanitize_headers(headers) == {
            "Authorization": REDACTED,
            "X-Webhook-Signature": REDACTED,
            "Accept": "application/json",
        }

    def test_error_context(self) -> None:
        error = UnauthorizedError("Invalid credentials", context={"secret": "s"})

        result = sanitize_error_context(error, {"request_path": "/api/admin/login"})

        assert result["error_type"] == "UnauthorizedError"
        assert result["request_path"] == "/api/admin/login"
        assert result["error_attributes"]["context"] == {"secret": REDACTED}
        assert "stack_trace" not in result["error_attributes"]

    @pytest.mark.parametrize(
        ("params", "expected"),
        [
            (None, None),
            ({"password_hash": "h", "id": 1}, {"password_hash": REDACTED, "id": 1}),
            ((1, 2), (1, 2)),
            ("raw", REDACTED),
        ],
    )
    def test_sql_params(self, params: object, expected: object) -> None:
        assert sanitize_sql_params(params) == expected
