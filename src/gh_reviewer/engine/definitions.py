"""Immutable workflow and agent definitions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from langgraph.graph import END, START

from .errors import WorkflowDefinitionError
from .routing import RoutingPolicy
from .tools import AgentTool

SUPERVISOR = "supervisor"
RESERVED_NAMES = frozenset({SUPERVISOR, START, END})


def format_agent_name(name: str) -> str:
    """`security_agent` -> `Security_Agent`."""

    return "_".join(word[:1].upper() + word[1:] for word in name.split("_"))


@dataclass(frozen=True, slots=True)
class AgentDefinition:
    name: str
    instruction: str
    tools: tuple[AgentTool, ...] = ()

    @property
    def display_name(self) -> str:
        return format_agent_name(self.name)


@dataclass(frozen=True, slots=True)
class WorkflowDefinition:
    """Static description of a supervisor workflow.

    Built once per workflow type and reused by every run of that type.
    """

    name: str
    system_prompt: str
    routing_description: str
    human_prompt: str
    agents: tuple[AgentDefinition, ...]
    max_supervisor_calls: int
    members: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        agent_names = [agent.name for agent in self.agents]
        members = self.members or tuple(agent_names)
        object.__setattr__(self, "members", tuple(members))

        if not members:
            raise WorkflowDefinitionError(f"Workflow {self.name!r} declares no members")
        if len(set(members)) != len(members):
            raise WorkflowDefinitionError(f"Workflow {self.name!r} has duplicate members")
        reserved = RESERVED_NAMES.intersection(members)
        if reserved:
            raise WorkflowDefinitionError(
                f"Workflow {self.name!r} uses reserved names: {', '.join(sorted(reserved))}"
            )
        if sorted(agent_names) != sorted(members):
            raise WorkflowDefinitionError(
                f"Workflow {self.name!r} members {list(members)} do not match "
                f"agent definitions {agent_names}"
            )
        if self.max_supervisor_calls < 1:
            raise WorkflowDefinitionError("max_supervisor_calls must be at least 1")

    @classmethod
    def from_agents(
        cls,
        *,
        name: str,
        members: Iterable[str],
        agents: Iterable[AgentDefinition],
        system_prompt: str,
        routing_description: str,
        human_prompt: str,
        max_supervisor_calls: int,
    ) -> WorkflowDefinition:
        by_name = {agent.name: agent for agent in agents}
        ordered = tuple(members)
        missing = [m for m in ordered if m not in by_name]
        if missing:
            raise WorkflowDefinitionError(
                f"Workflow {name!r} has no agent definition for: {', '.join(missing)}"
            )
        return cls(
            name=name,
            system_prompt=system_prompt,
            routing_description=routing_description,
            human_prompt=human_prompt,
            agents=tuple(by_name[m] for m in ordered),
            max_supervisor_calls=max_supervisor_calls,
            members=ordered,
        )

    def routing_policy(self) -> RoutingPolicy:
        return RoutingPolicy(
            members=self.members,
            system_prompt=self.system_prompt,
            routing_description=self.routing_description,
            human_prompt=self.human_prompt,
        )
