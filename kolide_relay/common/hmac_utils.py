"""HMAC utilities for webhook signature validation."""

import hmac
import hashlib
import logging

logger = logging.getLogger(__name__)


def compute_hmac_sha256(data: bytes, secret: str) -> str:
    """Compute HMAC-SHA256 signature for given data and secret."""
    return hmac.new(
        secret.encode('utf-8'),
        data,
        hashlib.sha256
    ).hexdigest()


def verify_signature(data: bytes, signature: str, secret: str) -> bool:
    """Verify a Kolide webhook signature taken from the Authorization header.

    Kolide sends the bare lowercase hex digest; the presented value is compared
    case-insensitively. Any mismatch returns False rather than raising.
    """
    if not signature:
        return False

    expected_signature = compute_hmac_sha256(data, secret)

    # bytes comparison so non-ASCII header values are a plain mismatch
    presented = signature.lower().encode('utf-8')
    return hmac.compare_digest(expected_signature.encode('utf-8'), presented)
