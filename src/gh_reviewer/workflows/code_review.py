"""Initial review of a newly opened pull request."""

from __future__ import annotations

import textwrap

from langchain_core.messages import BaseMessage, HumanMessage

from gh_reviewer.engine.definitions import AgentDefinition, WorkflowDefinition
from gh_reviewer.github.tools import GitHubToolkit
from gh_reviewer.prompts.loader import PromptLoader
from gh_reviewer.workflows.base import SupervisorWorkflow

PROMPTS = "code-reviewer"
MEMBERS = (
    "summarizer",
    "security_agent",
    "performance_agent",
    "code_quality_agent",
    "reviewer",
)


def build_code_review_definition(
    prompts: PromptLoader, toolkit: GitHubToolkit, *, max_supervisor_calls: int
) -> WorkflowDefinition:
    workflow = prompts.load_workflow(PROMPTS)
    instructions = prompts.require_agents(PROMPTS, MEMBERS)

    # Only the summarizer reads GitHub; the reviewer may anchor findings to lines.
    tools = {
        "summarizer": toolkit.read_tools(),
        "reviewer": (toolkit.create_review_comment(),),
    }
    agents = [
        AgentDefinition(name=name, instruction=instructions[name], tools=tools.get(name, ()))
        for name in MEMBERS
    ]
    return WorkflowDefinition.from_agents(
        name=PROMPTS,
        members=MEMBERS,
        agents=agents,
        system_prompt=workflow.system_prompt,
        routing_description=workflow.routing_description,
        human_prompt=workflow.human_prompt,
        max_supervisor_calls=max_supervisor_calls,
    )


class CodeReviewWorkflow(SupervisorWorkflow[None]):
    def create_initial_message(
        self, owner: str, repo: str, number: int, context: None = None
    ) -> BaseMessage:
        return HumanMessage(
            content=textwrap.dedent(
                f"""\
                You are tasked with reviewing a pull request.

                - Owner: {owner}
                - Repository: {repo}
                - Pull Request Number: {number}

                You MUST use the tools provided to you to read the pull request.
                Be specific, proportional and actionable, in the tone of a senior
                engineer. Do not give generic advice unrelated to this change.
                """
            )
        )
