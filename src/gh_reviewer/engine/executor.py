"""Builds and runs the supervisor graph for one workflow run."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from langgraph.errors import GraphRecursionError
from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from .collaborators import DecisionOracle, ReasoningSession
from .context import RunContext
from .definitions import SUPERVISOR, WorkflowDefinition
from .errors import IterationLimitExceeded
from .nodes import make_agent_node, make_supervisor_node
from .state import RunState, route_of

logger = logging.getLogger(__name__)


def recursion_limit_for(max_supervisor_calls: int) -> int:
    """LangGraph superstep limit that leaves room for the engine's own ceiling.

    A run of N decisions takes at most N supervisor steps and N agent steps; the
    extra steps let the supervisor raise IterationLimitExceeded itself.
    """

    return 2 * max_supervisor_calls + 3


class GraphExecutor:
    """Compiles a fresh graph per run and drives it to completion."""

    def __init__(
        self,
        definition: WorkflowDefinition,
        *,
        oracle: DecisionOracle,
        session: ReasoningSession,
        state_schema: type[Any] = RunState,
    ) -> None:
        self.definition = definition
        self.oracle = oracle
        self.session = session
        self.state_schema = state_schema
        self.policy = definition.routing_policy()

    def build(self, context: RunContext) -> CompiledStateGraph:
        graph = StateGraph(self.state_schema)
        graph.add_node(
            SUPERVISOR,
            make_supervisor_node(
                self.policy,
                self.oracle,
                max_calls=self.definition.max_supervisor_calls,
            ),
        )
        for agent in self.definition.agents:
            graph.add_node(agent.name, make_agent_node(agent, self.session, context))
            graph.add_edge(agent.name, SUPERVISOR)

        path_map = {member: member for member in self.definition.members}
        path_map[END] = END
        graph.add_edge(START, SUPERVISOR)
        graph.add_conditional_edges(SUPERVISOR, route_of, path_map)

        return graph.compile(checkpointer=context.checkpointer, store=context.store)

    def run(self, initial: Mapping[str, Any], context: RunContext) -> dict[str, Any]:
        """Run to the terminal marker and return the final state."""

        limit = recursion_limit_for(self.definition.max_supervisor_calls)
        app = self.build(context)
        try:
            result = app.invoke(dict(initial), context.runnable_config(limit))
        except GraphRecursionError as e:
            raise IterationLimitExceeded(self.definition.max_supervisor_calls) from e
        return dict(result)
