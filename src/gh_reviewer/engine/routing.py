"""Routing policy: the closed set of places the supervisor may send a run."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from langgraph.graph import END

from .errors import RoutingViolation

ROUTE_TOOL_NAME = "route"
ROUTE_FIELD = "next"


@dataclass(frozen=True, slots=True)
class RoutingRequest:
    """Everything the decision oracle is given for one decision."""

    messages: tuple[BaseMessage, ...]
    destinations: tuple[str, ...]
    description: str


class RoutingPolicy:
    """Renders oracle requests and validates oracle answers.

    Prompts may reference `{options}` (all legal destinations, terminal marker
    first) and `{members}` (agent names only).
    """

    def __init__(
        self,
        *,
        members: Sequence[str],
        system_prompt: str,
        routing_description: str,
        human_prompt: str,
    ) -> None:
        self.members = tuple(members)
        self.destinations: tuple[str, ...] = (END, *self.members)
        self.routing_description = routing_description
        self._prompt = ChatPromptTemplate.from_messages(
            [
                ("system", system_prompt),
                MessagesPlaceholder("messages"),
                ("human", human_prompt),
            ]
        ).partial(options=", ".join(self.destinations), members=", ".join(self.members))

    def request(self, history: Sequence[BaseMessage]) -> RoutingRequest:
        rendered = self._prompt.format_messages(messages=list(history))
        return RoutingRequest(
            messages=tuple(rendered),
            destinations=self.destinations,
            description=self.routing_description,
        )

    def resolve(self, raw: object) -> str:
        """Return `raw` if it names a legal destination, else raise RoutingViolation."""

        if isinstance(raw, str) and raw in self.destinations:
            return raw
        raise RoutingViolation(raw, self.destinations)
