"""Tool helpers: specs, outcomes and the handler error boundary."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from botocore.exceptions import BotoCoreError, ClientError

from aws_readonly_mcp.errors import ToolError, provider_failure_from

if TYPE_CHECKING:
    from aws_readonly_mcp.session import SessionManager
    from aws_readonly_mcp.tools._schemas import ToolInput


@dataclass(frozen=True)
class Success:
    payload: dict[str, object]


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str

    @classmethod
    def from_error(cls, exc: ToolError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message)


Outcome = Union[Success, Failure]

ToolHandler = Callable[["SessionManager", Any], Awaitable[Outcome]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, object]
    input_model: type["ToolInput"]
    handler: ToolHandler

    def descriptor(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def tool_handler(
    func: Callable[["SessionManager", Any], Awaitable[dict[str, object]]],
) -> ToolHandler:
    """Turn a payload-returning coroutine into one returning an ``Outcome``.

    Tool errors and botocore errors become ``Failure`` values here; anything
    else propagates to the dispatcher.
    """

    @functools.wraps(func)
    async def wrapper(session: "SessionManager", arguments: Any) -> Outcome:
        try:
            payload = await func(session, arguments)
        except ToolError as exc:
            return Failure.from_error(exc)
        except (ClientError, BotoCoreError) as exc:
            return Failure.from_error(provider_failure_from(exc))
        return Success(payload)

    return wrapper
