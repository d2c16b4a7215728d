"""FastAPI app factory.

The webhook endpoint only deals with HTTP concerns (configuration, signature,
JSON parsing, response envelope) and hands the delivery to `WebhookService`.
Workflow runs are blocking, so they execute on the threadpool.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from gh_reviewer import __version__
from gh_reviewer.config import BotSettings
from gh_reviewer.github.mentions import BotIdentity
from gh_reviewer.webhook.registry import ServiceRegistry, default_bundle_factory
from gh_reviewer.webhook.service import WebhookError, WebhookService
from gh_reviewer.webhook.signature import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)


def envelope(*, success: bool, status_code: int = 200, **body: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": success, **body, "timestamp": datetime.now(tz=UTC).isoformat()},
    )


def create_app(
    settings: BotSettings | None = None, *, registry: ServiceRegistry | None = None
) -> FastAPI:
    if settings is None:
        settings = BotSettings()
    if registry is None:
        registry = ServiceRegistry(
            default_bundle_factory(settings),
            max_age_seconds=settings.installation_cache_seconds,
        )
    service = WebhookService(registry, bot=BotIdentity(settings.github_app_name))

    app = FastAPI(
        title="gh-reviewer",
        version=__version__,
        description="GitHub App that reviews pull requests with a team of LLM agents.",
    )

    # Expose for request handlers and tests.
    app.state.settings = settings
    app.state.registry = registry

    @app.exception_handler(WebhookError)
    async def webhook_error(_request: Request, exc: WebhookError) -> JSONResponse:
        logger.warning(
            "Webhook rejected", extra={"status_code": exc.status_code, "reason": exc.message}
        )
        return envelope(success=False, status_code=exc.status_code, error=exc.message)

    @app.exception_handler(Exception)
    async def unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Webhook processing failed", exc_info=exc)
        return envelope(success=False, status_code=500, error=str(exc) or type(exc).__name__)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.get("/")
    def index() -> JSONResponse:
        return envelope(
            success=True,
            data={
                "name": "gh-reviewer",
                "version": __version__,
                "endpoints": {"health": "/health", "webhook": "/webhook"},
            },
        )

    @app.post("/webhook")
    async def webhook(request: Request) -> JSONResponse:
        missing = settings.missing_github_app_settings()
        if missing:
            raise WebhookError(
                500, f"GitHub App configuration is incomplete; missing: {', '.join(missing)}"
            )

        body = await request.body()
        if not verify_signature(
            settings.github_webhook_secret,
            body,
            request.headers.get(SIGNATURE_HEADER),
            allow_unsigned=settings.allow_unsigned_webhooks,
        ):
            raise WebhookError(401, "Invalid webhook signature")

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise WebhookError(400, "Failed to parse webhook payload: invalid JSON") from e
        if not isinstance(payload, dict):
            raise WebhookError(400, "Failed to parse webhook payload: expected a JSON object")

        event = request.headers.get("X-GitHub-Event", "")
        logger.info(
            "Webhook received",
            extra={"event": event, "delivery": request.headers.get("X-GitHub-Delivery")},
        )
        result = await run_in_threadpool(service.process, event, payload)
        return envelope(success=True, data=result.model_dump(mode="json"))

    return app
