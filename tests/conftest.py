"""Project-wide test configuration.

The environment is pinned before any ``nagarkar`` module is imported so the
module-level application is built against SQLite with tracing disabled.
"""

import os
from collections.abc import Generator

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault(
    "DATABASE_CONFIG__DATABASE_URL", "sqlite+aiosqlite:///:memory:"
)
os.environ.setdefault("OBSERVABILITY_CONFIG__ENABLE_TRACING", "false")
os.environ.setdefault("GATEWAY_CONFIG__SMS_LATENCY_MS", "0")
os.environ.setdefault("GATEWAY_CONFIG__PAYMENT_LATENCY_MS", "0")

import pytest  # noqa: E402
from loguru import logger  # noqa: E402

from nagarkar.api.dependencies import get_penalty_calculator  # noqa: E402
from nagarkar.core.config import get_settings  # noqa: E402
from nagarkar.core.context import RequestContext  # noqa: E402
from nagarkar.core.logging import _state  # noqa: E402
from nagarkar.infrastructure.gateways import (  # noqa: E402
    get_payment_gateway,
    get_sms_client,
)


@pytest.fixture(autouse=True)
def clear_caches() -> Generator[None]:
    """Give every test fresh settings, rules and gateway clients."""
    caches = (get_settings, get_penalty_calculator, get_sms_client, get_payment_gateway)
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Keep correlation IDs and principals from leaking between tests."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None]:
    """Keep app creation from adding stdout sinks during tests."""
    logger.remove()
    _state.configured = True
    yield
    logger.remove()
