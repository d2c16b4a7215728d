"""Load workflow and agent prompts from disk.

Layout per workflow:

    <root>/<workflow>/workflow.yml     system_prompt, routing_description, human_prompt
    <root>/<workflow>/<agent-name>.md  one instruction per agent

Agent file names are kebab-case; agent names are snake_case.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

BUNDLED_PROMPTS_DIR = Path(__file__).resolve().parent
WORKFLOW_FILE = "workflow.yml"


class PromptLoadError(RuntimeError):
    pass


class WorkflowPrompts(BaseModel):
    system_prompt: str
    routing_description: str
    human_prompt: str


def agent_name_for(path: Path) -> str:
    return path.stem.replace("-", "_")


class PromptLoader:
    """Reads prompt files once per instance."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = Path(root) if root is not None else BUNDLED_PROMPTS_DIR
        self._cache: dict[tuple[str, str], Any] = {}
        self._lock = threading.Lock()

    def _workflow_dir(self, workflow: str) -> Path:
        path = self.root / workflow
        if not path.is_dir():
            raise PromptLoadError(f"No prompts for workflow {workflow!r} under {self.root}")
        return path

    def load_workflow(self, workflow: str) -> WorkflowPrompts:
        key = ("workflow", workflow)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        path = self._workflow_dir(workflow) / WORKFLOW_FILE
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise PromptLoadError(f"Could not read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise PromptLoadError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise PromptLoadError(f"{path} must contain a mapping")
        try:
            prompts = WorkflowPrompts.model_validate(raw)
        except ValidationError as e:
            raise PromptLoadError(f"{path} is missing prompt fields: {e}") from e

        with self._lock:
            self._cache[key] = prompts
        logger.debug("Loaded workflow prompts", extra={"workflow": workflow})
        return prompts

    def load_agents(self, workflow: str) -> dict[str, str]:
        """Agent instructions keyed by snake_case agent name."""

        key = ("agents", workflow)
        with self._lock:
            if key in self._cache:
                return dict(self._cache[key])

        directory = self._workflow_dir(workflow)
        agents: dict[str, str] = {}
        for path in sorted(directory.glob("*.md")):
            if path.name == "workflow.md":
                continue
            try:
                agents[agent_name_for(path)] = path.read_text(encoding="utf-8").strip()
            except OSError as e:
                raise PromptLoadError(f"Could not read {path}: {e}") from e

        with self._lock:
            self._cache[key] = agents
        logger.debug(
            "Loaded agent prompts", extra={"workflow": workflow, "agents": sorted(agents)}
        )
        return dict(agents)

    def require_agents(self, workflow: str, names: Iterable[str]) -> dict[str, str]:
        """Instructions for exactly `names`; every one of them must have a prompt file."""

        agents = self.load_agents(workflow)
        wanted = list(names)
        missing = [name for name in wanted if name not in agents]
        if missing:
            raise PromptLoadError(
                f"Workflow {workflow!r} has no prompt for: {', '.join(missing)}"
            )
        return {name: agents[name] for name in wanted}

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.info("Prompt cache cleared")
