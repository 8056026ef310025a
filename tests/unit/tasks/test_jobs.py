"""Unit tests for the Celery task wrappers."""

from decimal import Decimal

import pytest
from pytest_mock import MockerFixture

from nagarkar.services.jobs import OverdueCheckResult, WeeklyReminderResult
from nagarkar.tasks import jobs


@pytest.mark.unit
class TestTasks:
    def test_overdue_task_returns_json_friendly_result(
        self, mocker: MockerFixture
    ) -> None:
        mocker.patch.object(
            jobs,
            "run_job",
            return_value=OverdueCheckResult(
                records_processed=2,
                penalties_applied=1,
                total_penalty_amount=Decimal(100),
                reminders_created=2,
                failed_records=[],
            ),
        )

        result = jobs.check_overdue_taxes_task.run()

        assert result == {
            "records_processed": 2,
            "penalties_applied": 1,
            "total_penalty_amount": "100",
            "reminders_created": 2,
            "failed_records": [],
        }

    def test_weekly_task(self, mocker: MockerFixture) -> None:
        mocker.patch.object(
            jobs, "run_job", return_value=WeeklyReminderResult(reminders_created=3)
        )
        assert jobs.send_weekly_reminders_task.run() == {"reminders_created": 3}

    async def test_session_is_closed_after_job(self, mocker: MockerFixture) -> None:
        close = mocker.patch.object(jobs, "close_database")
        session = mocker.AsyncMock()
        session_cm = mocker.patch.object(jobs, "get_async_session")
        session_cm.return_value.__aenter__.return_value = session

        async def job(s: object) -> str:
            assert s is session
            return "done"

        assert await jobs._in_session(job) == "done"
        close.assert_awaited_once()
