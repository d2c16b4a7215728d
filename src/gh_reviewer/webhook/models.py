"""Pydantic models for the parts of GitHub webhook payloads the bot reads."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Account(_Payload):
    login: str
    type: str | None = None


class Repository(_Payload):
    name: str
    full_name: str
    owner: Account


class PullRequest(_Payload):
    number: int
    title: str = ""
    state: str = ""
    draft: bool = False
    merged: bool = False


class Issue(_Payload):
    number: int
    title: str = ""
    # Present only when the issue is a pull request.
    pull_request: dict[str, Any] | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class Comment(_Payload):
    id: int = 0
    body: str = ""
    user: Account
    path: str | None = None
    line: int | None = None


class Installation(_Payload):
    id: int
    account: Account | None = None


class WebhookEvent(_Payload):
    action: str = "unknown"
    number: int | None = None
    repository: Repository | None = None
    pull_request: PullRequest | None = None
    issue: Issue | None = None
    comment: Comment | None = None
    installation: Installation | None = None

    zen: str | None = None
    hook_id: int | None = None

    @property
    def installation_id(self) -> int | None:
        return self.installation.id if self.installation is not None else None


class WebhookResult(BaseModel):
    message: str
    event: str
    action: str
    outcome: str = "ignored"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
