from __future__ import annotations

from unittest.mock import Mock

import pytest
from langgraph.graph import END

from conftest import EchoSession, ScriptedOracle
from gh_reviewer.github.client import GitHubClient
from gh_reviewer.github.tools import GitHubToolkit
from gh_reviewer.prompts.loader import PromptLoader
from gh_reviewer.workflows.code_review import (
    CodeReviewWorkflow,
    build_code_review_definition,
)
from gh_reviewer.workflows.interactive import (
    InteractiveAssistantWorkflow,
    InteractiveContext,
    build_assistant_definition,
    describe_request,
)


@pytest.fixture
def toolkit() -> GitHubToolkit:
    return GitHubToolkit(Mock(spec=GitHubClient))


def _tool_names(definition, agent: str) -> list[str]:
    (found,) = [a for a in definition.agents if a.name == agent]
    return [t.name for t in found.tools]


def test_code_review_definition_from_bundled_prompts(toolkit: GitHubToolkit) -> None:
    definition = build_code_review_definition(
        PromptLoader(), toolkit, max_supervisor_calls=40
    )

    assert definition.members == (
        "summarizer",
        "security_agent",
        "performance_agent",
        "code_quality_agent",
        "reviewer",
    )
    assert definition.max_supervisor_calls == 40
    assert _tool_names(definition, "summarizer") == [
        "get_pull_request",
        "get_pull_request_files",
        "get_file_content",
        "get_pull_request_diff",
    ]
    assert _tool_names(definition, "reviewer") == ["create_review_comment"]
    assert _tool_names(definition, "security_agent") == []


def test_assistant_definition_gives_responder_comment_history(toolkit: GitHubToolkit) -> None:
    definition = build_assistant_definition(PromptLoader(), toolkit, max_supervisor_calls=25)

    assert definition.members[-1] == "responder"
    assert "get_pr_comments" in _tool_names(definition, "responder")
    assert "get_pull_request_diff" in _tool_names(definition, "summarizer")
    assert _tool_names(definition, "performance_agent") == []


@pytest.mark.parametrize(
    ("context", "expected"),
    [
        (None, "Provide general assistance for acme/widgets#7"),
        (
            InteractiveContext(kind="question", user_query="Is this safe?"),
            'User question about acme/widgets#7: "Is this safe?"',
        ),
        (
            InteractiveContext(
                kind="mention", user_query="why?", specific_file="app.py", line_number=12
            ),
            'User question about acme/widgets#7: "why?" regarding file: app.py at line 12',
        ),
        (
            InteractiveContext(kind="comment", user_query="thanks"),
            'User commented on acme/widgets#7: "thanks" - provide helpful response',
        ),
        (
            InteractiveContext(kind="push", changed_files=["a.py", "b.py"]),
            "New changes pushed to acme/widgets#7. Changed files: a.py, b.py."
            " Analyze what changed.",
        ),
        (
            InteractiveContext(kind="push"),
            "New changes pushed to acme/widgets#7. Analyze what changed.",
        ),
    ],
)
def test_describe_request(context, expected: str) -> None:
    assert describe_request("acme", "widgets", 7, context) == expected


def test_code_review_run_starts_from_pull_request_coordinates(toolkit: GitHubToolkit) -> None:
    session = EchoSession()
    workflow = CodeReviewWorkflow(
        build_code_review_definition(PromptLoader(), toolkit, max_supervisor_calls=10),
        oracle=ScriptedOracle(["summarizer", "reviewer", END]),
        session=session,
    )

    last = workflow.execute("acme", "widgets", 42)

    assert last.name == "Reviewer"
    first_seen = session.calls[0][1][0].content
    assert "- Owner: acme" in first_seen
    assert "- Repository: widgets" in first_seen
    assert "- Pull Request Number: 42" in first_seen


def test_bot_command_keeps_user_context_in_state(toolkit: GitHubToolkit) -> None:
    workflow = InteractiveAssistantWorkflow(
        build_assistant_definition(PromptLoader(), toolkit, max_supervisor_calls=10),
        oracle=ScriptedOracle(["responder", END]),
        session=EchoSession(),
    )

    last = workflow.handle_bot_command(
        "acme", "widgets", 3, "explain this", "octocat", specific_file="api.py", line_number=8
    )

    assert last.name == "Responder"
    assert 'User question about acme/widgets#3: "explain this"' in last.content
    (run,) = workflow.runs("acme", "widgets", 3).values()
    assert run["status"] == "completed"


def test_user_context_reaches_the_checkpoint(toolkit: GitHubToolkit) -> None:
    workflow = InteractiveAssistantWorkflow(
        build_assistant_definition(PromptLoader(), toolkit, max_supervisor_calls=10),
        oracle=ScriptedOracle([END]),
        session=EchoSession(),
    )
    context = InteractiveContext(kind="push", changed_files=["x.py"])
    run = workflow.open_context("acme", "widgets", 4)
    initial = {
        "messages": [workflow.create_initial_message("acme", "widgets", 4, context)],
        **workflow.context_state(context),
    }

    final = workflow.executor.run(initial, run)

    assert final["user_context"] == context
    assert len(run.latest_checkpoint()["messages"]) == 1


def test_context_state_is_empty_without_context(toolkit: GitHubToolkit) -> None:
    workflow = InteractiveAssistantWorkflow(
        build_assistant_definition(PromptLoader(), toolkit, max_supervisor_calls=10),
        oracle=ScriptedOracle([END]),
        session=EchoSession(),
    )

    assert workflow.context_state(None) == {}
    assert workflow.execute("acme", "widgets", 5).content == (
        "Provide general assistance for acme/widgets#5"
    )
