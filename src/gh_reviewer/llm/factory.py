"""Factory for creating chat models."""

import logging
from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from gh_reviewer.config import BotSettings

logger = logging.getLogger(__name__)


class LLMFactory:
    """Factory for creating chat model instances."""

    @staticmethod
    def create(settings: BotSettings) -> BaseChatModel:
        """Create a chat model based on configuration.

        Args:
            settings: Bot settings naming the provider, model and sampling options.

        Returns:
            Configured chat model. Retries on transient API errors are handled by the
            provider client (`LLM_MAX_RETRIES`).

        Raises:
            ValueError: If the provider is not supported or its API key is missing.
        """
        logger.info(
            "Creating chat model",
            extra={"provider": settings.llm_provider, "model": settings.llm_model},
        )

        options: dict[str, Any] = {
            "model": settings.llm_model,
            "max_retries": settings.llm_max_retries,
        }
        if settings.llm_temperature is not None:
            options["temperature"] = settings.llm_temperature
        if settings.llm_top_p is not None:
            options["top_p"] = settings.llm_top_p
        if settings.llm_max_tokens is not None:
            options["max_tokens"] = settings.llm_max_tokens

        if settings.llm_provider == "anthropic":
            if not settings.anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY is required for the anthropic provider")
            return ChatAnthropic(api_key=settings.anthropic_api_key, **options)
        elif settings.llm_provider == "openai":
            if not settings.openai_api_key:
                raise ValueError("OPENAI_API_KEY is required for the openai provider")
            return ChatOpenAI(api_key=settings.openai_api_key, **options)
        else:
            raise ValueError(f"Unsupported LLM provider: {settings.llm_provider}")
