"""GitHub webhook signatures (`X-Hub-Signature-256`)."""

from __future__ import annotations

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return _PREFIX + digest


def verify_signature(
    secret: str, body: bytes, signature: str | None, *, allow_unsigned: bool = False
) -> bool:
    """Check a delivery's HMAC-SHA256 signature against the raw request body.

    A missing signature is rejected unless `allow_unsigned` is set. A present
    but wrong signature is always rejected.
    """

    if not signature:
        if allow_unsigned:
            logger.warning("Accepting unsigned webhook delivery")
            return True
        return False
    if not secret:
        return False
    return hmac.compare_digest(signature.strip(), compute_signature(secret, body))
