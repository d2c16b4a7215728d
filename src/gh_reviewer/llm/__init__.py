"""Chat-model backed collaborators of the orchestration engine."""

from gh_reviewer.llm.factory import LLMFactory
from gh_reviewer.llm.oracle import ChatModelOracle
from gh_reviewer.llm.session import ReactAgentSession

__all__ = ["ChatModelOracle", "LLMFactory", "ReactAgentSession"]
