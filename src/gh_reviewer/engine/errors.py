"""Terminal failures of a workflow run.

Every error raised by a node aborts the run and reaches the caller of
`SupervisorWorkflow.execute` unchanged. Nothing here is retried.
"""

from __future__ import annotations

from collections.abc import Sequence


class OrchestrationError(Exception):
    """Base class for errors that abort a workflow run."""


class RoutingViolation(OrchestrationError):
    """The decision oracle chose a destination outside the legal set."""

    def __init__(self, destination: object, allowed: Sequence[str]) -> None:
        self.destination = destination
        self.allowed = tuple(allowed)
        super().__init__(
            f"Supervisor chose {destination!r}; expected one of: {', '.join(self.allowed)}"
        )


class IterationLimitExceeded(OrchestrationError):
    """The supervisor ran more times than the workflow allows."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Supervisor exceeded {limit} decisions without finishing (likely a routing loop)"
        )


class ToolInvocationFailure(OrchestrationError):
    """A tool called by an agent rejected its arguments or failed."""

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"Tool {tool!r} failed: {reason}")


class OracleUnavailable(OrchestrationError):
    """The reasoning backend or the decision oracle could not produce an answer."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Reasoning backend unavailable: {reason}")


class WorkflowDefinitionError(ValueError):
    pass
