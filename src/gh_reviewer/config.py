"""Configuration for the review bot.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Settings are constructed once at process start (`create_app` or the CLI) and passed
explicitly to the components that need them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Settings for the webhook server, the GitHub App and the LLM backend.

    Notes:
        The server can start without GitHub App credentials; the webhook endpoint
        validates them per request (see :meth:`missing_github_app_settings`).
        Tests can override the env file via `BotSettings(_env_file=path)`.
    """

    github_app_id: str = Field(default="", validation_alias="GITHUB_APP_ID")
    github_private_key_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_PRIVATE_KEY_PATH",
        description="PEM private key of the GitHub App",
    )
    github_webhook_secret: str = Field(default="", validation_alias="GITHUB_WEBHOOK_SECRET")
    github_app_name: str = Field(
        default="ai-code-reviewer",
        validation_alias="GITHUB_APP_NAME",
        description="Bot login used to detect mentions and skip the bot's own comments",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    allow_unsigned_webhooks: bool = Field(
        default=False,
        validation_alias="ALLOW_UNSIGNED_WEBHOOKS",
        description=(
            "Accept deliveries that carry no X-Hub-Signature-256 header. "
            "Deliveries with a wrong signature are always rejected."
        ),
    )

    llm_provider: Literal["anthropic", "openai"] = Field(
        default="anthropic", validation_alias="LLM_PROVIDER"
    )
    llm_model: str = Field(default="claude-sonnet-4-20250514", validation_alias="LLM_MODEL")
    llm_temperature: float | None = Field(
        default=None, ge=0.0, le=2.0, validation_alias="LLM_TEMPERATURE"
    )
    llm_top_p: float | None = Field(default=None, gt=0.0, le=1.0, validation_alias="LLM_TOP_P")
    llm_max_tokens: int | None = Field(default=None, gt=0, validation_alias="LLM_MAX_TOKENS")
    llm_max_retries: int = Field(default=3, ge=0, validation_alias="LLM_MAX_RETRIES")
    anthropic_api_key: str | None = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")

    review_max_supervisor_calls: int = Field(
        default=40,
        ge=1,
        validation_alias="REVIEW_MAX_SUPERVISOR_CALLS",
        description="Supervisor decisions allowed per code review run",
    )
    assistant_max_supervisor_calls: int = Field(
        default=25,
        ge=1,
        validation_alias="ASSISTANT_MAX_SUPERVISOR_CALLS",
        description="Supervisor decisions allowed per interactive assistant run",
    )
    agent_step_limit: int = Field(
        default=25,
        ge=2,
        validation_alias="AGENT_STEP_LIMIT",
        description="Recursion limit of a single agent's reasoning session",
    )

    installation_cache_seconds: float = Field(
        default=3000.0,
        gt=0,
        validation_alias="INSTALLATION_CACHE_SECONDS",
        description=(
            "Maximum age of cached per-installation services. Installation tokens "
            "expire after one hour, so keep this below 3600."
        ),
    )

    prompts_dir: Path | None = Field(default=None, validation_alias="PROMPTS_DIR")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def missing_github_app_settings(self) -> list[str]:
        """Return the names of required GitHub App variables that are unset."""

        missing: list[str] = []
        if not self.github_app_id.strip():
            missing.append("GITHUB_APP_ID")
        if self.github_private_key_path is None:
            missing.append("GITHUB_PRIVATE_KEY_PATH")
        if not self.github_webhook_secret.strip():
            missing.append("GITHUB_WEBHOOK_SECRET")
        return missing

    def read_private_key(self) -> str:
        if self.github_private_key_path is None:
            raise ValueError("GITHUB_PRIVATE_KEY_PATH is required")
        return self.github_private_key_path.read_text(encoding="utf-8")
