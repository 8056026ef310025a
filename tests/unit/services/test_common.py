"""Tests for the shared service helpers."""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from nagarkar.services.common import local_today

# 01:30 on April 1st in Kolkata, still March 31st in UTC
INSTANT = datetime(2024, 3, 31, 20, 0, tzinfo=UTC)


@pytest.mark.unit
class TestLocalToday:
    @pytest.fixture
    def clock(self, mocker: MockerFixture) -> MagicMock:
        clock = mocker.patch("nagarkar.services.common.datetime")
        clock.now.side_effect = INSTANT.astimezone
        return clock

    def test_uses_the_schedule_timezone(self, clock: MagicMock) -> None:
        assert local_today() == date(2024, 4, 1)

        [tz] = clock.now.call_args.args
        assert str(tz) == "Asia/Kolkata"

    def test_follows_configured_timezone(
        self, clock: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SCHEDULER_CONFIG__TIMEZONE", "UTC")

        assert local_today() == date(2024, 3, 31)
