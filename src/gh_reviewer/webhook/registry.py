"""Per-installation service bundles.

A bundle holds an installation-scoped GitHub client and the workflows built on
it. Bundles are created on first use, replaced once they are older than the
installation token lifetime allows, and evicted when the App is uninstalled.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from gh_reviewer.config import BotSettings
from gh_reviewer.github.client import GitHubClient
from gh_reviewer.github.tools import GitHubToolkit
from gh_reviewer.llm.factory import LLMFactory
from gh_reviewer.llm.oracle import ChatModelOracle
from gh_reviewer.llm.session import ReactAgentSession
from gh_reviewer.prompts.loader import PromptLoader
from gh_reviewer.workflows.code_review import CodeReviewWorkflow, build_code_review_definition
from gh_reviewer.workflows.interactive import (
    InteractiveAssistantWorkflow,
    build_assistant_definition,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceBundle:
    github: GitHubClient
    review: CodeReviewWorkflow
    assistant: InteractiveAssistantWorkflow


BundleFactory = Callable[[int], ServiceBundle]


def default_bundle_factory(
    settings: BotSettings, prompts: PromptLoader | None = None
) -> BundleFactory:
    """Build bundles authenticated as the configured GitHub App."""

    loader = prompts if prompts is not None else PromptLoader(settings.prompts_dir)

    def build(installation_id: int) -> ServiceBundle:
        github = GitHubClient.for_installation(
            app_id=settings.github_app_id,
            private_key=settings.read_private_key(),
            installation_id=installation_id,
            base_url=settings.github_base_url,
        )
        toolkit = GitHubToolkit(github)
        model = LLMFactory.create(settings)
        oracle = ChatModelOracle(model)
        session = ReactAgentSession(model, step_limit=settings.agent_step_limit)

        review = CodeReviewWorkflow(
            build_code_review_definition(
                loader, toolkit, max_supervisor_calls=settings.review_max_supervisor_calls
            ),
            oracle=oracle,
            session=session,
        )
        assistant = InteractiveAssistantWorkflow(
            build_assistant_definition(
                loader, toolkit, max_supervisor_calls=settings.assistant_max_supervisor_calls
            ),
            oracle=oracle,
            session=session,
        )
        return ServiceBundle(github=github, review=review, assistant=assistant)

    return build


class ServiceRegistry:
    """Thread-safe cache of service bundles keyed by installation id."""

    def __init__(
        self,
        factory: BundleFactory,
        *,
        max_age_seconds: float = 3000.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self._max_age_seconds = max_age_seconds
        self._clock = clock
        self._bundles: dict[int, tuple[float, ServiceBundle]] = {}
        self._building: dict[int, threading.Lock] = {}
        self._lock = threading.Lock()

    def get(self, installation_id: int) -> ServiceBundle:
        with self._lock:
            building = self._building.setdefault(installation_id, threading.Lock())

        # One build per installation at a time; the factory makes network calls,
        # so other installations are not held up while it runs.
        with building:
            with self._lock:
                cached = self._bundles.get(installation_id)
            now = self._clock()
            if cached is not None:
                created_at, bundle = cached
                if now - created_at < self._max_age_seconds:
                    return bundle
                # Runs still holding the old bundle keep using it until they finish.
                logger.info(
                    "Refreshing expired services", extra={"installation_id": installation_id}
                )

            bundle = self._factory(installation_id)
            with self._lock:
                self._bundles[installation_id] = (now, bundle)
        logger.info("Services created", extra={"installation_id": installation_id})
        return bundle

    def evict(self, installation_id: int) -> bool:
        with self._lock:
            cached = self._bundles.pop(installation_id, None)
        if cached is None:
            return False
        cached[1].github.close()
        logger.info("Services evicted", extra={"installation_id": installation_id})
        return True

    def clear(self) -> None:
        with self._lock:
            bundles = list(self._bundles.values())
            self._bundles.clear()
        for _, bundle in bundles:
            bundle.github.close()

    def __contains__(self, installation_id: object) -> bool:
        with self._lock:
            return installation_id in self._bundles

    def __len__(self) -> int:
        with self._lock:
            return len(self._bundles)
