from __future__ import annotations

from langchain_core.messages import AIMessage, HumanMessage
from langgraph.graph import END

from gh_reviewer.engine.state import (
    append_messages,
    keep_latest,
    latest_route,
    message_author,
    message_text,
    route_of,
)


def test_append_messages_concatenates_without_touching_existing() -> None:
    first = HumanMessage(content="start")
    existing = [first]
    second = HumanMessage(content="finding", name="Security_Agent")

    merged = append_messages(existing, [second])

    assert merged == [first, second]
    assert existing == [first]
    assert merged[0] is first


def test_append_messages_accepts_single_message_and_none() -> None:
    msg = HumanMessage(content="x")

    assert append_messages(None, msg) == [msg]
    assert append_messages([msg], None) == [msg]


def test_latest_route_defaults_to_terminal_marker() -> None:
    assert latest_route(None, None) == END
    assert latest_route("", "") == END
    assert latest_route("agent1", None) == "agent1"
    assert latest_route("agent1", "agent2") == "agent2"


def test_keep_latest_ignores_none_updates() -> None:
    assert keep_latest("old", None) == "old"
    assert keep_latest("old", "new") == "new"
    assert keep_latest(None, None) is None


def test_route_of_reads_next_or_terminal() -> None:
    assert route_of({"messages": [], "next": "agent1", "supervisor_calls": 1}) == "agent1"
    assert route_of({"messages": [], "next": "", "supervisor_calls": 0}) == END


def test_message_author_and_text() -> None:
    assert message_author(HumanMessage(content="hi")) == "human"
    assert message_author(HumanMessage(content="hi", name="Reviewer")) == "Reviewer"

    blocks = AIMessage(
        content=[
            {"type": "text", "text": "first"},
            {"type": "citation", "source": "diff"},
            "second",
        ]
    )
    text = message_text(blocks)

    assert text.startswith("first\n")
    assert '"citation"' in text
    assert text.endswith("second")
