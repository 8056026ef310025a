"""Core application constants."""

MILLISECONDS_PER_SECOND = 1000

# Security and redaction
REDACTED = "[REDACTED]"

# Identifier prefixes
CUSTOMER_ID_PREFIX = "CID"
RECEIPT_NUMBER_PREFIX = "RCP"
CURRENCY_SYMBOL = "₹"
