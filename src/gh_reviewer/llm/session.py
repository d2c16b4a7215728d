"""Reasoning session: one agent turn as a prebuilt LangGraph ReAct agent."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, SystemMessage
from langchain_core.tools import ToolException
from langgraph.errors import GraphRecursionError
from langgraph.prebuilt import ToolNode, create_react_agent

from gh_reviewer.engine.errors import OracleUnavailable, OrchestrationError, ToolInvocationFailure
from gh_reviewer.engine.tools import AgentTool

logger = logging.getLogger(__name__)


class ReactAgentSession:
    """Runs an agent's instruction and tools against the run's history.

    Tool errors are not fed back to the model: they abort the run.
    """

    def __init__(self, model: BaseChatModel, *, step_limit: int = 25) -> None:
        self.model = model
        self.step_limit = step_limit

    def run(
        self,
        *,
        instruction: str,
        tools: Sequence[AgentTool[Any]],
        messages: Sequence[BaseMessage],
    ) -> str | list[str | dict[str, Any]]:
        lc_tools = [tool.as_langchain_tool() for tool in tools]
        agent = create_react_agent(
            self.model,
            tools=ToolNode(lc_tools, handle_tool_errors=False) if lc_tools else [],
            prompt=SystemMessage(content=instruction),
        )

        try:
            result = agent.invoke(
                {"messages": list(messages)}, {"recursion_limit": self.step_limit}
            )
        except OrchestrationError:
            raise
        except ToolException as e:
            # Argument errors are raised by AgentTool.parse with the tool name;
            # this covers ToolExceptions raised by LangGraph itself.
            tool = getattr(e, "tool_name", None) or "unknown"
            raise ToolInvocationFailure(tool, str(e)) from e
        except GraphRecursionError as e:
            raise OracleUnavailable(
                f"agent did not finish within {self.step_limit} steps"
            ) from e
        except Exception as e:
            raise OracleUnavailable(str(e) or type(e).__name__) from e

        final = result["messages"][-1]
        logger.debug(
            "Reasoning session finished",
            extra={"steps": len(result["messages"]) - len(messages), "tools": len(lc_tools)},
        )
        return final.content
