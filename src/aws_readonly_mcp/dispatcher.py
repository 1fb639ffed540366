"""Tool dispatch and response envelopes.

``Dispatcher.dispatch`` resolves a tool by exact name, validates the raw
arguments, runs the handler against the session's current adapters and turns
the outcome into a ``ToolResult``. It does not raise: unknown tools, invalid
input and AWS failures all come back as ``is_error`` envelopes carrying
``{"error": <message>}``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from aws_readonly_mcp.errors import UnknownToolError, ValidationFailure
from aws_readonly_mcp.mcp_runtime import ToolResult
from aws_readonly_mcp.session import SessionManager
from aws_readonly_mcp.tools import build_registry, get_tool_specs
from aws_readonly_mcp.tools._schemas import validate_input
from aws_readonly_mcp.tools.base import Failure, Outcome, Success, ToolSpec
from aws_readonly_mcp.utils.serialization import to_json_text

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal_error"


def build_envelope(outcome: Outcome) -> ToolResult:
    """Encode an outcome as the protocol response envelope."""
    if isinstance(outcome, Success):
        return ToolResult(
            content=[{"type": "text", "text": to_json_text(outcome.payload)}],
            is_error=False,
            structured_content=outcome.payload,
        )
    return ToolResult(
        content=[{"type": "text", "text": to_json_text({"error": outcome.message})}],
        is_error=True,
    )


class Dispatcher:
    """Routes tool name -> handler for one session."""

    def __init__(self, session: SessionManager, specs: Iterable[ToolSpec] | None = None) -> None:
        self._session = session
        self._tools = build_registry(specs if specs is not None else get_tool_specs())

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def list_tools(self) -> list[dict[str, object]]:
        return [spec.descriptor() for spec in self._tools.values()]

    async def dispatch(self, name: str, raw_arguments: object = None) -> ToolResult:
        outcome = await self._run(name, raw_arguments)
        if isinstance(outcome, Failure):
            logger.error(
                "Tool execution error: tool=%s kind=%s error=%s",
                name,
                outcome.kind,
                outcome.message,
            )
        return build_envelope(outcome)

    async def _run(self, name: str, raw_arguments: object) -> Outcome:
        spec = self._tools.get(name)
        if spec is None:
            return Failure.from_error(UnknownToolError(name))

        arguments = dict(raw_arguments) if isinstance(raw_arguments, Mapping) else {}
        validated = validate_input(spec.input_model, arguments)
        if isinstance(validated, ValidationFailure):
            return Failure.from_error(validated)

        try:
            return await spec.handler(self._session, validated)
        except Exception as exc:
            logger.exception("Unhandled error in tool %s", name)
            return Failure(kind=INTERNAL_ERROR, message=str(exc) or type(exc).__name__)
