"""Capabilities the engine consumes but does not implement."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from langchain_core.messages import BaseMessage

from .routing import RoutingRequest
from .tools import AgentTool


class DecisionOracle(Protocol):
    """Chooses the next destination of a run.

    Must answer with one of `request.destinations`; anything else is rejected by
    the supervisor as a routing violation.
    """

    def decide(self, request: RoutingRequest) -> str | None: ...


class ReasoningSession(Protocol):
    """Runs one agent turn: zero or more tool calls, then a final output."""

    def run(
        self,
        *,
        instruction: str,
        tools: Sequence[AgentTool[Any]],
        messages: Sequence[BaseMessage],
    ) -> str | list[str | dict[str, Any]]: ...
