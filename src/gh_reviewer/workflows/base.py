"""Base class for supervisor workflows bound to a pull request."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from langchain_core.messages import BaseMessage
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import InMemorySaver
from langgraph.store.base import BaseStore
from langgraph.store.memory import InMemoryStore

from gh_reviewer.engine.collaborators import DecisionOracle, ReasoningSession
from gh_reviewer.engine.context import RunContext, thread_key
from gh_reviewer.engine.definitions import WorkflowDefinition
from gh_reviewer.engine.errors import OrchestrationError
from gh_reviewer.engine.executor import GraphExecutor
from gh_reviewer.engine.state import RunState, message_author
from gh_reviewer.logging import run_log_context

logger = logging.getLogger(__name__)

ContextT = TypeVar("ContextT")


class SupervisorWorkflow(ABC, Generic[ContextT]):
    """Runs a `WorkflowDefinition` against one pull request at a time.

    The definition, oracle and session are shared by every run of this workflow.
    Each call to :meth:`execute` gets its own graph, run context and state.
    """

    state_schema: type[Any] = RunState

    def __init__(
        self,
        definition: WorkflowDefinition,
        *,
        oracle: DecisionOracle,
        session: ReasoningSession,
        checkpointer: BaseCheckpointSaver | None = None,
        store: BaseStore | None = None,
    ) -> None:
        self.definition = definition
        self.checkpointer = checkpointer or InMemorySaver()
        self.store = store or InMemoryStore()
        self.executor = GraphExecutor(
            definition, oracle=oracle, session=session, state_schema=self.state_schema
        )

    @abstractmethod
    def create_initial_message(
        self, owner: str, repo: str, number: int, context: ContextT | None
    ) -> BaseMessage:
        """The message that starts a run."""

    def context_state(self, context: ContextT | None) -> dict[str, Any]:
        """Auxiliary state fields seeded from the caller's context."""

        return {}

    def open_context(self, owner: str, repo: str, number: int) -> RunContext:
        return RunContext.open(
            thread_key(owner, repo, number), checkpointer=self.checkpointer, store=self.store
        )

    def execute(
        self, owner: str, repo: str, number: int, context: ContextT | None = None
    ) -> BaseMessage:
        """Run the workflow for a pull request and return its final message.

        Raises:
            OrchestrationError: the run aborted (routing violation, iteration
                ceiling, tool failure or unavailable reasoning backend).
        """

        run = self.open_context(owner, repo, number)
        initial = {
            "messages": [self.create_initial_message(owner, repo, number, context)],
            **self.context_state(context),
        }

        with run_log_context(thread_id=run.thread_id, run_id=run.run_id):
            logger.info("Workflow started", extra={"workflow": self.definition.name})
            run.record_status("running", workflow=self.definition.name)
            try:
                final = self.executor.run(initial, run)
            except OrchestrationError as e:
                run.record_status("failed", workflow=self.definition.name, error=str(e))
                logger.error(
                    "Workflow failed",
                    extra={"workflow": self.definition.name, "error_type": type(e).__name__},
                    exc_info=True,
                )
                raise

            messages: list[BaseMessage] = final["messages"]
            run.record_status(
                "completed",
                workflow=self.definition.name,
                messages=len(messages),
                supervisor_calls=final.get("supervisor_calls", 0),
            )
            logger.info(
                "Workflow completed",
                extra={
                    "workflow": self.definition.name,
                    "messages": len(messages),
                    "author": message_author(messages[-1]),
                },
            )
            return messages[-1]

    def findings(self, owner: str, repo: str, number: int) -> dict[str, str]:
        """Latest output of each agent that has run for this pull request."""

        return self.open_context(owner, repo, number).findings()

    def runs(self, owner: str, repo: str, number: int) -> dict[str, dict[str, Any]]:
        return self.open_context(owner, repo, number).runs()
