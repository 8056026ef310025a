"""Celery worker and beat schedule for the recurring tax jobs."""

from nagarkar.tasks.celery_app import celery_app

__all__ = ["celery_app"]
