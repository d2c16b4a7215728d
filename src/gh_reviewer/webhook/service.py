"""Routes webhook deliveries to the review and assistant workflows."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from langchain_core.messages import BaseMessage
from pydantic import ValidationError

from gh_reviewer.engine.errors import OrchestrationError
from gh_reviewer.engine.state import message_text
from gh_reviewer.github.mentions import BotIdentity, should_exclude_file
from gh_reviewer.webhook.models import WebhookEvent, WebhookResult
from gh_reviewer.webhook.registry import ServiceBundle, ServiceRegistry
from gh_reviewer.workflows.interactive import InteractiveContext

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = frozenset({"opened", "reopened", "ready_for_review"})
INSTALLATION_EVENTS = frozenset({"installation", "installation_repositories"})
EVICTING_ACTIONS = frozenset({"deleted", "suspend"})

MERGED_COMMENT = "🎉 **PR Merged!** Thanks for the great code contribution!"
FAILURE_COMMENT = (
    "⚠️ I couldn't finish analysing this pull request. "
    "The failure has been logged; mention me again to retry."
)


class WebhookError(Exception):
    """A delivery the HTTP layer must reject."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def greeting(user: str) -> str:
    return f"👋 Hi @{user}! I'm here to help with code reviews. Ask me anything about this PR!"


class WebhookService:
    """Dispatches one parsed delivery. Runs the workflow inline and posts its result."""

    def __init__(
        self,
        registry: ServiceRegistry,
        *,
        bot: BotIdentity,
        exclude_patterns: Iterable[str] = (),
    ) -> None:
        self.registry = registry
        self.bot = bot
        self.exclude_patterns = tuple(exclude_patterns)

    def process(self, event: str, payload: Mapping[str, Any]) -> WebhookResult:
        try:
            parsed = WebhookEvent.model_validate(dict(payload))
        except ValidationError as e:
            raise WebhookError(
                400, f"Failed to parse webhook payload: {e.error_count()} errors"
            ) from e

        if event == "ping":
            logger.info(
                "Webhook ping received", extra={"zen": parsed.zen, "hook_id": parsed.hook_id}
            )
            return WebhookResult(
                message="Pong! Webhook is active", event="ping", action="ping", outcome="pong"
            )

        if event in INSTALLATION_EVENTS:
            return self._handle_installation(event, parsed)

        installation_id = parsed.installation_id
        if installation_id is None:
            raise WebhookError(
                400, "GitHub App installation ID is required for this webhook event"
            )
        if parsed.repository is None:
            raise WebhookError(400, "Webhook event missing repository information")

        logger.info(
            "Processing webhook event",
            extra={
                "event": event,
                "action": parsed.action,
                "repo": parsed.repository.full_name,
                "installation_id": installation_id,
            },
        )

        handlers: dict[str, Callable[[WebhookEvent, int], str]] = {
            "pull_request": self._handle_pull_request,
            "issue_comment": self._handle_issue_comment,
            "pull_request_review_comment": self._handle_review_comment,
        }
        handler = handlers.get(event)
        if handler is None:
            logger.info("Unhandled event type", extra={"event": event})
            outcome = "ignored"
        else:
            outcome = handler(parsed, installation_id)

        return WebhookResult(
            message="Webhook processed successfully",
            event=event,
            action=parsed.action,
            outcome=outcome,
        )

    def _handle_installation(self, event: str, parsed: WebhookEvent) -> WebhookResult:
        installation_id = parsed.installation_id
        account = None
        if parsed.installation is not None and parsed.installation.account is not None:
            account = parsed.installation.account.login
        logger.info(
            "GitHub App installation event",
            extra={
                "action": parsed.action,
                "installation_id": installation_id,
                "account": account,
            },
        )
        outcome = "ignored"
        if parsed.action in EVICTING_ACTIONS and installation_id is not None:
            self.registry.evict(installation_id)
            outcome = "evicted"
        return WebhookResult(
            message=f"{event} event processed successfully",
            event=event,
            action=parsed.action,
            outcome=outcome,
        )

    def _handle_pull_request(self, parsed: WebhookEvent, installation_id: int) -> str:
        pr = parsed.pull_request
        repository = parsed.repository
        if pr is None or repository is None:
            logger.warning("Missing pull_request or repository data")
            return "ignored"

        owner, repo, number = repository.owner.login, repository.name, pr.number

        if parsed.action in REVIEW_ACTIONS:
            bundle = self.registry.get(installation_id)
            details = bundle.github.get_pull_request(owner=owner, repo=repo, pull_number=number)
            if details.draft:
                logger.info(
                    "Skipping draft PR",
                    extra={"repo": repository.full_name, "pull_number": number},
                )
                return "skipped_draft"
            return self._run_and_post(
                bundle, owner, repo, number, lambda: bundle.review.execute(owner, repo, number)
            )

        if parsed.action == "synchronize":
            bundle = self.registry.get(installation_id)
            files = bundle.github.get_pull_request_files(owner=owner, repo=repo, pull_number=number)
            changed = [
                f.filename
                for f in files
                if not should_exclude_file(f.filename, self.exclude_patterns)
            ]
            context = InteractiveContext(kind="push", changed_files=changed)
            return self._run_and_post(
                bundle,
                owner,
                repo,
                number,
                lambda: bundle.assistant.execute(owner, repo, number, context),
            )

        if parsed.action == "closed":
            if not pr.merged:
                return "ignored"
            bundle = self.registry.get(installation_id)
            bundle.github.create_pr_comment(
                owner=owner, repo=repo, pull_number=number, body=MERGED_COMMENT
            )
            return "thanked"

        logger.info("Unhandled PR action", extra={"action": parsed.action})
        return "ignored"

    def _handle_issue_comment(self, parsed: WebhookEvent, installation_id: int) -> str:
        issue, comment, repository = parsed.issue, parsed.comment, parsed.repository
        if comment is None or repository is None or issue is None or not issue.is_pull_request:
            return "ignored"
        if parsed.action != "created":
            return "ignored"
        return self._handle_mention(
            installation_id,
            repository.owner.login,
            repository.name,
            issue.number,
            comment.body,
            comment.user.login,
        )

    def _handle_review_comment(self, parsed: WebhookEvent, installation_id: int) -> str:
        comment, repository, pr = parsed.comment, parsed.repository, parsed.pull_request
        if comment is None or repository is None or pr is None:
            return "ignored"
        if parsed.action != "created":
            return "ignored"
        return self._handle_mention(
            installation_id,
            repository.owner.login,
            repository.name,
            pr.number,
            comment.body,
            comment.user.login,
            specific_file=comment.path,
            line_number=comment.line,
        )

    def _handle_mention(
        self,
        installation_id: int,
        owner: str,
        repo: str,
        number: int,
        body: str,
        user: str,
        *,
        specific_file: str | None = None,
        line_number: int | None = None,
    ) -> str:
        if self.bot.is_comment_from_bot(user) or not self.bot.is_bot_mentioned(body):
            return "ignored"

        command = self.bot.extract_command(body)
        bundle = self.registry.get(installation_id)
        if command is None:
            bundle.github.create_pr_comment(
                owner=owner, repo=repo, pull_number=number, body=greeting(user)
            )
            return "greeted"

        return self._run_and_post(
            bundle,
            owner,
            repo,
            number,
            lambda: bundle.assistant.handle_bot_command(
                owner,
                repo,
                number,
                command,
                user,
                specific_file=specific_file,
                line_number=line_number,
            ),
        )

    def _run_and_post(
        self,
        bundle: ServiceBundle,
        owner: str,
        repo: str,
        number: int,
        run: Callable[[], BaseMessage],
    ) -> str:
        """Run a workflow and post its final message; post a short notice if the run aborts."""

        try:
            final = run()
        except OrchestrationError as e:
            logger.error(
                "Workflow run aborted",
                extra={
                    "repo": f"{owner}/{repo}",
                    "pull_number": number,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            bundle.github.create_pr_comment(
                owner=owner, repo=repo, pull_number=number, body=FAILURE_COMMENT
            )
            return "failed"

        text = message_text(final).strip()
        if not text:
            logger.warning("Workflow produced an empty message", extra={"pull_number": number})
            return "empty"
        bundle.github.create_pr_comment(owner=owner, repo=repo, pull_number=number, body=text)
        return "posted"
