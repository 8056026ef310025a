"""Unit tests for the mapping of application errors to HTTP statuses."""

import pytest

from nagarkar.api.middleware.error_handler import get_service_info, status_code_for
from nagarkar.core.config import Settings
from nagarkar.core.exceptions import (
    ConflictError,
    ErrorCode,
    ForbiddenError,
    NagarkarError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


@pytest.mark.unit
class TestStatusCodeFor:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (ValidationError("bad"), 400),
            (ValidationError("x", error_code=ErrorCode.PAYMENT_FAILED), 400),
            (UnauthorizedError("who"), 401),
            (ForbiddenError("no"), 403),
            (NotFoundError("gone"), 404),
            (ConflictError("twice"), 409),
            (NagarkarError(ErrorCode.INTERNAL_ERROR, "boom"), 500),
        ],
    )
    def test_mapping(self, error: NagarkarError, expected: int) -> None:
        assert status_code_for(error) == expected


@pytest.mark.unit
def test_service_info_reflects_settings() -> None:
    info = get_service_info(Settings(app_name="Nagarkar", app_version="9.9.9"))
    assert (info.name, info.version, info.environment) == (
        "Nagarkar",
        "9.9.9",
        "development",
    )
