"""Security utilities - inbound webhook verification."""

from src.app.core.security.webhooks import compute_signature, verify_webhook_request

__all__ = [
    "compute_signature",
    "verify_webhook_request",
]
