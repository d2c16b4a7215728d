"""Per-run context: identity, checkpoint thread and auxiliary memory."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from langchain_core.runnables import RunnableConfig
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.store.base import BaseStore

logger = logging.getLogger(__name__)

RUNS_NAMESPACE = "runs"
FINDINGS_NAMESPACE = "findings"


def thread_key(owner: str, repo: str, number: int) -> str:
    """Thread id for a pull request: `owner/repo#number`."""

    return f"{owner}/{repo}#{number}"


@dataclass(frozen=True, slots=True)
class RunContext:
    """Everything a single run needs besides its state.

    Several runs of the same thread may overlap (two deliveries for one PR), so
    checkpoints are keyed by thread and run id together.
    """

    thread_id: str
    run_id: str
    checkpointer: BaseCheckpointSaver
    store: BaseStore

    @classmethod
    def open(
        cls, thread_id: str, *, checkpointer: BaseCheckpointSaver, store: BaseStore
    ) -> RunContext:
        return cls(
            thread_id=thread_id,
            run_id=uuid.uuid4().hex,
            checkpointer=checkpointer,
            store=store,
        )

    @property
    def checkpoint_key(self) -> str:
        return f"{self.thread_id}:{self.run_id}"

    def runnable_config(self, recursion_limit: int | None = None) -> RunnableConfig:
        config: RunnableConfig = {"configurable": {"thread_id": self.checkpoint_key}}
        if recursion_limit is not None:
            config["recursion_limit"] = recursion_limit
        return config

    def record_status(self, status: str, **details: Any) -> None:
        """Write this run's entry in the thread's run index."""

        self.store.put(
            (RUNS_NAMESPACE, self.thread_id),
            self.run_id,
            {
                "status": status,
                "checkpoint": self.checkpoint_key,
                "updated_at": datetime.now(tz=UTC).isoformat(),
                **details,
            },
        )

    def runs(self) -> dict[str, dict[str, Any]]:
        """Run index of this thread, keyed by run id."""

        items = self.store.search((RUNS_NAMESPACE, self.thread_id), limit=1000)
        return {item.key: dict(item.value) for item in items}

    def remember_finding(self, agent: str, content: str) -> None:
        """Keep the latest output of an agent for this thread."""

        self.store.put(
            (FINDINGS_NAMESPACE, self.thread_id),
            agent,
            {"content": content, "run_id": self.run_id},
        )

    def findings(self) -> dict[str, str]:
        items = self.store.search((FINDINGS_NAMESPACE, self.thread_id), limit=1000)
        return {item.key: str(item.value.get("content", "")) for item in items}

    def latest_checkpoint(self) -> dict[str, Any] | None:
        """Channel values of the newest checkpoint of this run, if any."""

        saved = self.checkpointer.get_tuple(self.runnable_config())
        if saved is None:
            return None
        return dict(saved.checkpoint.get("channel_values", {}))
