"""Generation of citizen-facing identifiers."""

import random
import time

from nagarkar.core.constants import CUSTOMER_ID_PREFIX, RECEIPT_NUMBER_PREFIX


def generate_customer_id(rng: random.Random | None = None) -> str:
    """Return a login identifier such as ``CID482913057``.

    The last six digits of the epoch milliseconds are followed by three
    random digits.
    """
    rng = rng or random.Random()
    millis = str(time.time_ns() // 1_000_000)[-6:]
    return f"{CUSTOMER_ID_PREFIX}{millis}{rng.randrange(1000):03d}"


def generate_receipt_number(rng: random.Random | None = None) -> str:
    """Return a receipt number such as ``RCP4829130571``."""
    rng = rng or random.Random()
    millis = str(time.time_ns() // 1_000_000)[-8:]
    return f"{RECEIPT_NUMBER_PREFIX}{millis}{rng.randrange(100):02d}"
