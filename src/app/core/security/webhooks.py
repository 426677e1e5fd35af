"""Inbound webhook authentication."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Compute the X-Webhook-Signature value for a raw request body."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_webhook_request(
    secret: str | None,
    body: bytes,
    provided_secret: str | None,
    provided_signature: str | None,
) -> bool:
    """Check a delivery against the configured webhook secret.

    With no secret configured every delivery is accepted. Otherwise the
    sender must either echo the shared secret in X-Webhook-Secret or sign
    the raw body with HMAC-SHA256 in X-Webhook-Signature.
    """
    if not secret:
        return True

    if provided_secret is not None and hmac.compare_digest(
        provided_secret.encode(), secret.encode()
    ):
        return True

    if provided_signature:
        expected = compute_signature(secret, body)
        return hmac.compare_digest(provided_signature.encode(), expected.encode())

    return False
