"""Error kinds surfaced by tool handlers."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

VALIDATION_FAILURE = "validation_failure"
NOT_FOUND = "not_found"
UNKNOWN_TOOL = "unknown_tool"
PROVIDER_FAILURE = "provider_failure"
NO_CREDENTIALS_RETURNED = "no_credentials_returned"

_NOT_FOUND_CODES = frozenset({"NoSuchEntity", "NoSuchKey", "NoSuchBucket", "NotFound", "404"})


class ToolError(Exception):
    """Base error for anything a tool call can fail with.

    ``code`` carries the AWS error code when the failure came from a provider.
    """

    kind = PROVIDER_FAILURE

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationFailure(ToolError):
    """Caller input violated a field rule."""

    kind = VALIDATION_FAILURE

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class NotFoundError(ToolError):
    kind = NOT_FOUND


class UnknownToolError(ToolError):
    kind = UNKNOWN_TOOL

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ProviderFailure(ToolError):
    """An AWS call failed (access denied, throttling, network errors)."""

    kind = PROVIDER_FAILURE


class NoCredentialsReturnedError(ToolError):
    kind = NO_CREDENTIALS_RETURNED

    def __init__(self, message: str = "No credentials returned from AssumeRole") -> None:
        super().__init__(message)


class ToolRegistrationError(RuntimeError):
    """Raised at startup when the tool catalog is misconfigured."""


def provider_failure_from(exc: Exception) -> ToolError:
    """Map a botocore exception onto a ``ToolError`` keeping the AWS error code."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = str(error.get("Code", "Unknown"))
        message = str(error.get("Message") or exc)
        if code in _NOT_FOUND_CODES:
            return NotFoundError(f"{code}: {message}", code=code)
        return ProviderFailure(f"{code}: {message}", code=code)
    if isinstance(exc, BotoCoreError):
        return ProviderFailure(str(exc), code=type(exc).__name__)
    return ProviderFailure(str(exc))
