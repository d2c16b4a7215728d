"""Run state and its reducers.

LangGraph applies a field's reducer each time a node returns an update that
touches the field. Agents only ever append to `messages`; only the supervisor
writes `next`.

Annotations in this module are evaluated eagerly; LangGraph reads the reducers
from them at graph build time.
"""

import json
import operator
from collections.abc import Sequence
from typing import Annotated, Any, TypeVar

from langchain_core.messages import BaseMessage
from langgraph.graph import END
from typing_extensions import TypedDict

T = TypeVar("T")

HUMAN_AUTHOR = "human"


def append_messages(
    current: Sequence[BaseMessage] | None, incoming: BaseMessage | Sequence[BaseMessage] | None
) -> list[BaseMessage]:
    """Concatenate; never replaces, removes or reorders existing messages."""

    existing = list(current or [])
    if incoming is None:
        return existing
    if isinstance(incoming, BaseMessage):
        return [*existing, incoming]
    return [*existing, *incoming]


def latest_route(current: str | None, incoming: str | None) -> str:
    """Latest write wins; an unset route means the terminal marker."""

    if incoming:
        return incoming
    return current or END


def keep_latest(current: T | None, incoming: T | None) -> T | None:
    return incoming if incoming is not None else current


class RunState(TypedDict):
    """State threaded through every node of one run."""

    messages: Annotated[list[BaseMessage], append_messages]
    next: Annotated[str, latest_route]
    supervisor_calls: Annotated[int, operator.add]


def route_of(state: RunState) -> str:
    return state.get("next") or END


def message_author(message: BaseMessage) -> str:
    return message.name or HUMAN_AUTHOR


def message_text(message: BaseMessage) -> str:
    """Flatten message content to text.

    Chat models may answer with a list of content blocks; text blocks are joined
    and anything else is serialised as JSON.
    """

    content: Any = message.content
    if isinstance(content, str):
        return content

    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
        else:
            parts.append(json.dumps(block, ensure_ascii=False, default=str))
    return "\n".join(p for p in parts if p)
