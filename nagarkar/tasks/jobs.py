"""Celery entry points for the recurring jobs.

Each task runs its job on a fresh event loop inside one database session,
then disposes the engine so no connection outlives the loop.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import asdict
from typing import Any, TypeVar

from celery.signals import worker_process_init
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.config import get_settings
from nagarkar.core.logging import bind_context, setup_logging
from nagarkar.infrastructure.database.session import (
    close_database,
    get_async_session,
)
from nagarkar.services import jobs
from nagarkar.services.penalties import build_calculator
from nagarkar.tasks.celery_app import (
    OVERDUE_CHECK_TASK,
    WEEKLY_REMINDERS_TASK,
    celery_app,
)

R = TypeVar("R")


@worker_process_init.connect
def _configure_worker_logging(**_kwargs: object) -> None:
    setup_logging(get_settings())
    bind_context(component="worker")


async def _in_session(job: Callable[[AsyncSession], Awaitable[R]]) -> R:
    try:
        async with get_async_session() as session:
            return await job(session)
    finally:
        await close_database()


def run_job(job: Callable[[AsyncSession], Awaitable[R]]) -> R:
    """Run ``job`` to completion in a committed session."""
    return asyncio.run(_in_session(job))


@celery_app.task(name=OVERDUE_CHECK_TASK)
def check_overdue_taxes_task() -> dict[str, Any]:
    calculator = build_calculator(get_settings().penalty_config)
    result = run_job(lambda session: jobs.check_overdue_taxes(session, calculator))
    logger.info(
        "Overdue check task finished",
        records_processed=result.records_processed,
        penalties_applied=result.penalties_applied,
    )
    return asdict(result) | {
        "total_penalty_amount": str(result.total_penalty_amount)
    }


@celery_app.task(name=WEEKLY_REMINDERS_TASK)
def send_weekly_reminders_task() -> dict[str, Any]:
    result = run_job(jobs.send_weekly_reminders)
    logger.info(
        "Weekly reminder task finished", reminders_created=result.reminders_created
    )
    return asdict(result)
