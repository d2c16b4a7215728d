"""Supervisor-agent orchestration engine.

The engine knows nothing about GitHub: it routes a run between named agents
under a decision oracle until the oracle picks the terminal marker.
"""

from gh_reviewer.engine.collaborators import DecisionOracle, ReasoningSession
from gh_reviewer.engine.context import RunContext, thread_key
from gh_reviewer.engine.definitions import (
    AgentDefinition,
    WorkflowDefinition,
    format_agent_name,
)
from gh_reviewer.engine.errors import (
    IterationLimitExceeded,
    OracleUnavailable,
    OrchestrationError,
    RoutingViolation,
    ToolInvocationFailure,
    WorkflowDefinitionError,
)
from gh_reviewer.engine.executor import GraphExecutor
from gh_reviewer.engine.routing import RoutingPolicy, RoutingRequest
from gh_reviewer.engine.state import RunState
from gh_reviewer.engine.tools import AgentTool

__all__ = [
    "AgentDefinition",
    "AgentTool",
    "DecisionOracle",
    "GraphExecutor",
    "IterationLimitExceeded",
    "OracleUnavailable",
    "OrchestrationError",
    "ReasoningSession",
    "RoutingPolicy",
    "RoutingRequest",
    "RoutingViolation",
    "RunContext",
    "RunState",
    "ToolInvocationFailure",
    "WorkflowDefinition",
    "WorkflowDefinitionError",
    "format_agent_name",
    "thread_key",
]
