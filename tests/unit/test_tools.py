from __future__ import annotations

import json
from dataclasses import dataclass

import pytest
from pydantic import BaseModel, Field

from gh_reviewer.engine.errors import ToolInvocationFailure
from gh_reviewer.engine.tools import AgentTool, serialize_result


class LookupArgs(BaseModel):
    owner: str
    pull_number: int = Field(gt=0)


@dataclass(frozen=True)
class Found:
    owner: str
    number: int


def _tool(handler=None) -> AgentTool[LookupArgs]:
    return AgentTool(
        name="lookup",
        description="Look something up",
        args_model=LookupArgs,
        handler=handler or (lambda a: Found(owner=a.owner, number=a.pull_number)),
    )


def test_invoke_validates_and_serializes() -> None:
    out = _tool().invoke({"owner": "acme", "pull_number": "7"})

    assert json.loads(out) == {"owner": "acme", "number": 7}


def test_malformed_arguments_are_a_tool_failure() -> None:
    calls: list[LookupArgs] = []

    with pytest.raises(ToolInvocationFailure) as exc_info:
        _tool(calls.append).invoke({"owner": "acme", "pull_number": 0})

    assert exc_info.value.tool == "lookup"
    assert "pull_number" in exc_info.value.reason
    assert calls == []


def test_handler_errors_are_wrapped() -> None:
    def boom(_args: LookupArgs) -> str:
        raise ConnectionError("github down")

    with pytest.raises(ToolInvocationFailure, match="github down") as exc_info:
        _tool(boom).invoke({"owner": "acme", "pull_number": 1})

    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_serialize_result_handles_text_models_and_lists() -> None:
    assert serialize_result("plain") == "plain"
    assert json.loads(serialize_result(LookupArgs(owner="a", pull_number=2))) == {
        "owner": "a",
        "pull_number": 2,
    }
    assert json.loads(serialize_result([Found("a", 1), Found("b", 2)])) == [
        {"owner": "a", "number": 1},
        {"owner": "b", "number": 2},
    ]


def test_as_langchain_tool_exposes_schema_and_runs_handler() -> None:
    lc_tool = _tool().as_langchain_tool()

    assert lc_tool.name == "lookup"
    assert lc_tool.args_schema == LookupArgs.model_json_schema()
    assert json.loads(lc_tool.invoke({"owner": "acme", "pull_number": 3})) == {
        "owner": "acme",
        "number": 3,
    }


def test_langchain_tool_rejects_bad_arguments_with_its_name() -> None:
    with pytest.raises(ToolInvocationFailure) as exc_info:
        _tool().as_langchain_tool().invoke({"owner": "acme", "pull_number": "many"})

    assert exc_info.value.tool == "lookup"
    assert "pull_number" in exc_info.value.reason
