"""Tool catalog and registration helpers.

The catalog is fixed: S3 (buckets, objects, bucket policy), IAM (users, roles,
managed policies) and STS (role assumption, caller identity).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from aws_readonly_mcp.errors import ToolRegistrationError
from aws_readonly_mcp.tools.base import ToolSpec
from aws_readonly_mcp.tools.iam_tools import (
    get_iam_policy_tool,
    get_iam_role_tool,
    get_iam_user_tool,
    list_iam_policies_tool,
    list_iam_roles_tool,
    list_iam_users_tool,
)
from aws_readonly_mcp.tools.s3_tools import (
    get_s3_bucket_policy_tool,
    get_s3_object_tool,
    list_s3_buckets_tool,
    list_s3_objects_tool,
)
from aws_readonly_mcp.tools.sts_tools import assume_iam_role_tool, get_caller_identity_tool

if TYPE_CHECKING:
    from aws_readonly_mcp.dispatcher import Dispatcher
    from aws_readonly_mcp.mcp_runtime import MCPServer

__all__ = ["build_registry", "get_tool_registry", "get_tool_specs", "register_tools"]


def get_tool_specs() -> list[ToolSpec]:
    return [
        list_s3_buckets_tool,
        list_s3_objects_tool,
        get_s3_object_tool,
        get_s3_bucket_policy_tool,
        list_iam_users_tool,
        get_iam_user_tool,
        list_iam_roles_tool,
        get_iam_role_tool,
        list_iam_policies_tool,
        get_iam_policy_tool,
        assume_iam_role_tool,
        get_caller_identity_tool,
    ]


def _check_spec(spec: ToolSpec) -> None:
    try:
        Draft202012Validator.check_schema(spec.input_schema)
    except SchemaError as exc:
        raise ToolRegistrationError(f"Invalid input schema for {spec.name}: {exc.message}") from exc

    raw_properties = spec.input_schema.get("properties", {})
    properties = set(raw_properties) if isinstance(raw_properties, dict) else set()
    model_fields = {
        field.alias or name for name, field in spec.input_model.model_fields.items()
    }
    if properties != model_fields:
        raise ToolRegistrationError(
            f"Input schema for {spec.name} does not match its input model: "
            f"schema={sorted(properties)} model={sorted(model_fields)}"
        )


def build_registry(specs: Iterable[ToolSpec]) -> dict[str, ToolSpec]:
    """Index ``specs`` by name, rejecting duplicates and malformed schemas."""
    registry: dict[str, ToolSpec] = {}
    for spec in specs:
        if spec.name in registry:
            raise ToolRegistrationError(f"Duplicate tool name: {spec.name}")
        _check_spec(spec)
        registry[spec.name] = spec
    return registry


def get_tool_registry() -> dict[str, ToolSpec]:
    return build_registry(get_tool_specs())


def register_tools(server: "MCPServer", dispatcher: "Dispatcher") -> None:
    """Register every tool known to ``dispatcher`` with the MCP server."""
    logger = logging.getLogger(__name__)
    logger.info("Registering read-only AWS tools")

    for spec in dispatcher.tools:
        server.add_tool(spec, dispatcher)

    logger.info(
        "Registered %d tools: %s",
        len(dispatcher.tools),
        ", ".join(spec.name for spec in dispatcher.tools),
    )
