"""Bundled prompts and their loader."""

from gh_reviewer.prompts.loader import PromptLoader, PromptLoadError, WorkflowPrompts

__all__ = ["PromptLoadError", "PromptLoader", "WorkflowPrompts"]
