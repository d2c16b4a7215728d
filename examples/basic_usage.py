#!/usr/bin/env python3
"""Custom workflow example.

This demonstrates using the engine directly, outside the webhook server:

* load settings from `.env`
* define a two-agent "release notes" workflow in code
* run it against one pull request with a personal access token
* print the final message (nothing is posted to GitHub)
"""

from __future__ import annotations

import argparse
import os
import textwrap
from collections.abc import Sequence

from langchain_core.messages import BaseMessage, HumanMessage

from gh_reviewer.config import BotSettings
from gh_reviewer.engine import AgentDefinition, OrchestrationError, WorkflowDefinition
from gh_reviewer.engine.state import message_text
from gh_reviewer.github.client import GitHubClient
from gh_reviewer.github.tools import GitHubToolkit
from gh_reviewer.llm import ChatModelOracle, LLMFactory, ReactAgentSession
from gh_reviewer.logging import configure_logging
from gh_reviewer.workflows import SupervisorWorkflow

SYSTEM_PROMPT = """\
You coordinate a small team: {members}.
The reader runs first and gathers the pull request. The writer drafts release
notes from what the reader found. Choose __end__ once the notes are written.
"""

HUMAN_PROMPT = "Who should act next? Select one of: {options}"


class ReleaseNotesWorkflow(SupervisorWorkflow[None]):
    def create_initial_message(
        self, owner: str, repo: str, number: int, context: None = None
    ) -> BaseMessage:
        return HumanMessage(
            content=f"Write release notes for pull request {owner}/{repo}#{number}."
        )


def build_definition(toolkit: GitHubToolkit) -> WorkflowDefinition:
    return WorkflowDefinition(
        name="release-notes",
        system_prompt=SYSTEM_PROMPT,
        routing_description="Select the next team member, or __end__ when done.",
        human_prompt=HUMAN_PROMPT,
        agents=(
            AgentDefinition(
                name="reader",
                instruction="Read the pull request and its diff. Report what changed.",
                tools=(toolkit.get_pull_request(), toolkit.get_pull_request_diff()),
            ),
            AgentDefinition(
                name="writer",
                instruction=textwrap.dedent(
                    """\
                    Write user-facing release notes from the reader's report.
                    Use a short bullet list; skip internal refactors.
                    """
                ),
            ),
        ),
        max_supervisor_calls=6,
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draft release notes for a pull request.")
    parser.add_argument("--repo", required=True, help='Target repository in the form "owner/repo"')
    parser.add_argument("--pr", type=int, required=True, help="Pull request number")
    parser.add_argument(
        "--token-env",
        default="GITHUB_TOKEN",
        help="Environment variable holding a GitHub token (default: GITHUB_TOKEN)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    owner, _, repo = args.repo.partition("/")

    settings = BotSettings()
    configure_logging(settings.log_level)

    github = GitHubClient(token=os.environ[args.token_env], base_url=settings.github_base_url)
    model = LLMFactory.create(settings)
    workflow = ReleaseNotesWorkflow(
        build_definition(GitHubToolkit(github)),
        oracle=ChatModelOracle(model),
        session=ReactAgentSession(model, step_limit=settings.agent_step_limit),
    )

    try:
        final = workflow.execute(owner, repo, args.pr)
    except OrchestrationError as exc:
        print(f"Run aborted: {exc}")
        return 1
    finally:
        github.close()

    print(message_text(final))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
