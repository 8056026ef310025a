"""Celery application with the beat schedule of the recurring jobs.

Run a worker with beat embedded::

    celery -A nagarkar.tasks:celery_app worker --beat --loglevel=info
"""

from typing import Any

from celery import Celery
from celery.schedules import crontab

from nagarkar.core.config import SchedulerConfig, get_settings

OVERDUE_CHECK_TASK = "nagarkar.tasks.jobs.check_overdue_taxes_task"
WEEKLY_REMINDERS_TASK = "nagarkar.tasks.jobs.send_weekly_reminders_task"


def build_beat_schedule(config: SchedulerConfig) -> dict[str, dict[str, Any]]:
    """Daily overdue check and weekly reminders in the configured timezone."""
    return {
        "check-overdue-taxes": {
            "task": OVERDUE_CHECK_TASK,
            "schedule": crontab(
                hour=config.overdue_check_hour,
                minute=config.overdue_check_minute,
            ),
        },
        "send-weekly-reminders": {
            "task": WEEKLY_REMINDERS_TASK,
            "schedule": crontab(
                day_of_week=config.weekly_reminder_day_of_week,
                hour=config.weekly_reminder_hour,
                minute=config.weekly_reminder_minute,
            ),
        },
    }


def create_celery_app() -> Celery:
    config = get_settings().scheduler_config
    app = Celery(
        "nagarkar",
        broker=config.broker_url,
        backend=config.result_backend,
        include=["nagarkar.tasks.jobs"],
    )
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone=config.timezone,
        enable_utc=True,
        task_acks_late=True,
        task_time_limit=300,
        worker_prefetch_multiplier=1,
        worker_hijack_root_logger=False,
        beat_schedule=build_beat_schedule(config),
    )
    return app


celery_app = create_celery_app()
