"""HTTP routes, all mounted under ``/api``."""

from fastapi import APIRouter

from nagarkar.api.routers import (
    auth,
    citizens,
    cron,
    districts,
    payments,
    penalties,
    reminders,
    reports,
    taxes,
)

api_router = APIRouter()
for module in (
    auth,
    districts,
    citizens,
    taxes,
    payments,
    penalties,
    reminders,
    reports,
    cron,
):
    api_router.include_router(module.router)

__all__ = ["api_router"]
