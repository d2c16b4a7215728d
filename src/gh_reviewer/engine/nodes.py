"""Graph nodes: the supervisor and one node per agent.

Nodes return partial state updates; LangGraph merges them through the reducers
declared on the state type.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from langchain_core.messages import HumanMessage

from .collaborators import DecisionOracle, ReasoningSession
from .context import RunContext
from .definitions import AgentDefinition
from .errors import IterationLimitExceeded, OracleUnavailable, OrchestrationError
from .routing import RoutingPolicy
from .state import RunState, message_text

logger = logging.getLogger(__name__)

Node = Callable[[RunState], dict[str, Any]]


def make_supervisor_node(
    policy: RoutingPolicy,
    oracle: DecisionOracle,
    *,
    max_calls: int,
) -> Node:
    """Build the supervisor node.

    The ceiling is checked before the oracle is consulted, so a run never makes
    more than `max_calls` decisions.
    """

    def supervisor(state: RunState) -> dict[str, Any]:
        taken = state.get("supervisor_calls", 0)
        if taken >= max_calls:
            raise IterationLimitExceeded(max_calls)

        request = policy.request(state["messages"])
        try:
            raw = oracle.decide(request)
        except OrchestrationError:
            raise
        except Exception as e:
            raise OracleUnavailable(str(e) or type(e).__name__) from e

        destination = policy.resolve(raw)
        logger.info(
            "Supervisor routed",
            extra={"destination": destination, "decision": taken + 1},
        )
        return {"next": destination, "supervisor_calls": 1}

    return supervisor


def make_agent_node(
    agent: AgentDefinition,
    session: ReasoningSession,
    context: RunContext,
) -> Node:
    def run_agent(state: RunState) -> dict[str, Any]:
        logger.info("Agent started", extra={"agent": agent.name})
        try:
            output = session.run(
                instruction=agent.instruction,
                tools=agent.tools,
                messages=state["messages"],
            )
        except OrchestrationError:
            raise
        except Exception as e:
            raise OracleUnavailable(f"{agent.name}: {e}") from e

        message = HumanMessage(content=output, name=agent.display_name)
        text = message_text(message)
        context.remember_finding(agent.name, text)
        logger.info("Agent finished", extra={"agent": agent.name, "chars": len(text)})
        return {"messages": [message]}

    run_agent.__name__ = agent.name
    return run_agent
