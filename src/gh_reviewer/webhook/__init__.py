"""GitHub webhook handling: payloads, signatures and dispatch."""

from gh_reviewer.webhook.models import WebhookEvent, WebhookResult
from gh_reviewer.webhook.registry import ServiceBundle, ServiceRegistry, default_bundle_factory
from gh_reviewer.webhook.service import WebhookError, WebhookService
from gh_reviewer.webhook.signature import compute_signature, verify_signature

__all__ = [
    "ServiceBundle",
    "ServiceRegistry",
    "WebhookError",
    "WebhookEvent",
    "WebhookResult",
    "WebhookService",
    "compute_signature",
    "default_bundle_factory",
    "verify_signature",
]
