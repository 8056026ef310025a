"""Shared helpers for the mock gateway clients."""

import asyncio
import random
import string
import time
from typing import Final

from nagarkar.core.constants import MILLISECONDS_PER_SECOND

TOKEN_ALPHABET: Final[str] = string.ascii_lowercase + string.digits
TOKEN_LENGTH: Final[int] = 9


def mock_identifier(prefix: str, rng: random.Random) -> str:
    """Build an identifier like ``mock_msg_1718000000000_k3j9x0abc``."""
    token = "".join(rng.choices(TOKEN_ALPHABET, k=TOKEN_LENGTH))
    return f"{prefix}_{time.time_ns() // 1_000_000}_{token}"


async def simulate_latency(latency_ms: int) -> None:
    if latency_ms > 0:
        await asyncio.sleep(latency_ms / MILLISECONDS_PER_SECOND)
