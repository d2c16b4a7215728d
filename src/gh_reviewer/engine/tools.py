"""Typed tools that agents may call.

Each tool declares a pydantic input model. Arguments are validated before the
handler runs; malformed arguments and handler failures both surface as
`ToolInvocationFailure` and abort the run.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, ValidationError

from .errors import ToolInvocationFailure

logger = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def serialize_result(result: object) -> str:
    """Render a handler result as text for the reasoning session."""

    if isinstance(result, str):
        return result
    return json.dumps(_to_jsonable(result), ensure_ascii=False, default=str)


def _to_jsonable(value: object) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list | tuple):
        return [_to_jsonable(v) for v in value]
    return value


def _describe_validation_error(exc: ValidationError) -> str:
    problems = [
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in exc.errors()
    ]
    return "invalid arguments (" + "; ".join(problems) + ")"


@dataclass(frozen=True, slots=True)
class AgentTool(Generic[ArgsT]):
    """A named tool with a declared input shape.

    `invoke` is what the reasoning session calls: raw arguments in, text out.
    """

    name: str
    description: str
    args_model: type[ArgsT]
    handler: Callable[[ArgsT], object]
    serializer: Callable[[object], str] = serialize_result

    def parse(self, raw: Mapping[str, object]) -> ArgsT:
        try:
            return self.args_model.model_validate(dict(raw))
        except ValidationError as e:
            raise ToolInvocationFailure(self.name, _describe_validation_error(e)) from e

    def call(self, args: ArgsT) -> object:
        logger.debug("Invoking tool", extra={"tool": self.name})
        try:
            return self.handler(args)
        except ToolInvocationFailure:
            raise
        except Exception as e:
            raise ToolInvocationFailure(self.name, str(e) or type(e).__name__) from e

    def invoke(self, raw: Mapping[str, object]) -> str:
        return self.serializer(self.call(self.parse(raw)))

    def as_langchain_tool(self) -> StructuredTool:
        """Wrap for LangGraph. The model sees the JSON schema; `parse` does the validation."""

        def _run(**kwargs: Any) -> str:
            return self.invoke(kwargs)

        return StructuredTool.from_function(
            func=_run,
            name=self.name,
            description=self.description,
            args_schema=self.args_model.model_json_schema(),
        )
