"""Decision oracle backed by a chat model's forced tool call."""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage

from gh_reviewer.engine.errors import OracleUnavailable
from gh_reviewer.engine.routing import ROUTE_FIELD, ROUTE_TOOL_NAME, RoutingRequest

logger = logging.getLogger(__name__)


def route_tool_schema(request: RoutingRequest) -> dict[str, Any]:
    """OpenAI-style function schema whose only argument is an enum of destinations."""

    return {
        "type": "function",
        "function": {
            "name": ROUTE_TOOL_NAME,
            "description": request.description,
            "parameters": {
                "type": "object",
                "title": "routeSchema",
                "properties": {
                    ROUTE_FIELD: {
                        "title": "Next",
                        "type": "string",
                        "enum": list(request.destinations),
                    }
                },
                "required": [ROUTE_FIELD],
            },
        },
    }


class ChatModelOracle:
    """Asks the model to call `route` and reads the chosen destination.

    The answer is returned as-is; the supervisor validates it.
    """

    def __init__(self, model: BaseChatModel) -> None:
        self.model = model

    def decide(self, request: RoutingRequest) -> str | None:
        bound = self.model.bind_tools([route_tool_schema(request)], tool_choice=ROUTE_TOOL_NAME)
        try:
            response = bound.invoke(list(request.messages))
        except Exception as e:
            raise OracleUnavailable(f"routing call failed: {e}") from e

        if not isinstance(response, AIMessage):
            return None
        for call in response.tool_calls:
            if call.get("name") == ROUTE_TOOL_NAME:
                choice = call.get("args", {}).get(ROUTE_FIELD)
                logger.debug("Oracle answered", extra={"choice": choice})
                return choice
        logger.warning("Oracle answered without a route call")
        return None
