"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
WEBHOOK_SIGNATURE_HEADER = "X-Webhook-Signature"

# Routing
API_PREFIX = "/api"

# Security
DEFAULT_HSTS_MAX_AGE = 31536000  # 1 year in seconds
