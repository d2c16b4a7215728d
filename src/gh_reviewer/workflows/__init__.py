"""Pull request workflows built on the orchestration engine."""

from gh_reviewer.workflows.base import SupervisorWorkflow
from gh_reviewer.workflows.code_review import CodeReviewWorkflow, build_code_review_definition
from gh_reviewer.workflows.interactive import (
    InteractiveAssistantWorkflow,
    InteractiveContext,
    build_assistant_definition,
)

__all__ = [
    "CodeReviewWorkflow",
    "InteractiveAssistantWorkflow",
    "InteractiveContext",
    "SupervisorWorkflow",
    "build_assistant_definition",
    "build_code_review_definition",
]
