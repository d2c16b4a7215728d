"""Interactive assistant answering mentions, questions and pushes on a pull request.

Annotations in this module are evaluated eagerly; LangGraph reads the
`InteractiveState` reducers from them at graph build time.
"""

import logging
from typing import Annotated, Literal

from langchain_core.messages import BaseMessage, HumanMessage
from pydantic import BaseModel, ConfigDict, Field

from gh_reviewer.engine.definitions import AgentDefinition, WorkflowDefinition
from gh_reviewer.engine.state import RunState, keep_latest
from gh_reviewer.github.tools import GitHubToolkit
from gh_reviewer.prompts.loader import PromptLoader
from gh_reviewer.workflows.base import SupervisorWorkflow

logger = logging.getLogger(__name__)

PROMPTS = "interactive-assistant"
MEMBERS = (
    "summarizer",
    "security_agent",
    "performance_agent",
    "code_quality_agent",
    "responder",
)

ContextKind = Literal["comment", "push", "mention", "question"]


class InteractiveContext(BaseModel):
    """Why the assistant was invoked."""

    model_config = ConfigDict(frozen=True)

    kind: ContextKind = "comment"
    user_query: str | None = None
    changed_files: list[str] = Field(default_factory=list)
    specific_file: str | None = None
    line_number: int | None = None
    user: str | None = None


class InteractiveState(RunState):
    user_context: Annotated[InteractiveContext | None, keep_latest]


def build_assistant_definition(
    prompts: PromptLoader, toolkit: GitHubToolkit, *, max_supervisor_calls: int
) -> WorkflowDefinition:
    workflow = prompts.load_workflow(PROMPTS)
    instructions = prompts.require_agents(PROMPTS, MEMBERS)

    tools = {
        "summarizer": toolkit.read_tools(),
        "responder": (*toolkit.read_tools(), toolkit.get_pr_comments()),
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


def describe_request(
    owner: str, repo: str, number: int, context: InteractiveContext | None
) -> str:
    """First message of an assistant run."""

    pr = f"{owner}/{repo}#{number}"
    if context is None:
        return f"Provide general assistance for {pr}"

    if context.kind in ("mention", "question"):
        text = f'User question about {pr}: "{context.user_query or ""}"'
        if context.specific_file:
            text += f" regarding file: {context.specific_file}"
        if context.line_number:
            text += f" at line {context.line_number}"
        return text
    if context.kind == "comment":
        return f'User commented on {pr}: "{context.user_query or ""}" - provide helpful response'
    # push
    text = f"New changes pushed to {pr}"
    if context.changed_files:
        text += f". Changed files: {', '.join(context.changed_files)}"
    return text + ". Analyze what changed."


class InteractiveAssistantWorkflow(SupervisorWorkflow[InteractiveContext]):
    state_schema = InteractiveState

    def create_initial_message(
        self, owner: str, repo: str, number: int, context: InteractiveContext | None
    ) -> BaseMessage:
        return HumanMessage(content=describe_request(owner, repo, number, context))

    def context_state(self, context: InteractiveContext | None) -> dict[str, object]:
        return {"user_context": context} if context is not None else {}

    def handle_bot_command(
        self,
        owner: str,
        repo: str,
        number: int,
        command: str,
        user: str,
        specific_file: str | None = None,
        line_number: int | None = None,
    ) -> BaseMessage:
        """Answer a mention of the bot."""

        logger.info(
            "Handling bot command",
            extra={"repo": f"{owner}/{repo}", "pull_number": number, "user": user},
        )
        context = InteractiveContext(
            kind="mention",
            user_query=command,
            specific_file=specific_file,
            line_number=line_number,
            user=user,
        )
        return self.execute(owner, repo, number, context)
