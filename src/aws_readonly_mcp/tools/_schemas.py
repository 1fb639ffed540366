"""Input contracts for every tool.

Each tool has a JSON Schema advertised to callers and a pydantic model that
produces the typed, default-filled input its handler consumes. ``validate``
applies the model and returns either the model instance or a
``ValidationFailure``; it never calls AWS and never raises for bad input.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aws_readonly_mcp.config import (
    DEFAULT_SESSION_DURATION,
    MAX_SESSION_DURATION,
    MIN_SESSION_DURATION,
)
from aws_readonly_mcp.errors import ValidationFailure

DEFAULT_MAX_ITEMS = 100
MIN_MAX_ITEMS = 1
MAX_MAX_ITEMS = 1000

PolicyScope = Literal["All", "AWS", "Local"]


class ToolInput(BaseModel):
    """Base for validated tool input. Unknown keys are dropped."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ListBucketsInput(ToolInput):
    pass


class ListObjectsInput(ToolInput):
    bucket: str = Field(min_length=1, strict=True)
    prefix: str | None = Field(default=None, strict=True)
    max_keys: int = Field(
        default=DEFAULT_MAX_ITEMS, ge=MIN_MAX_ITEMS, le=MAX_MAX_ITEMS, strict=True, alias="maxKeys"
    )


class GetObjectInput(ToolInput):
    bucket: str = Field(min_length=1, strict=True)
    key: str = Field(min_length=1, strict=True)


class GetBucketPolicyInput(ToolInput):
    bucket: str = Field(min_length=1, strict=True)


class ListUsersInput(ToolInput):
    max_items: int = Field(
        default=DEFAULT_MAX_ITEMS, ge=MIN_MAX_ITEMS, le=MAX_MAX_ITEMS, strict=True, alias="maxItems"
    )


class GetUserInput(ToolInput):
    user_name: str = Field(min_length=1, strict=True, alias="userName")


class ListRolesInput(ToolInput):
    max_items: int = Field(
        default=DEFAULT_MAX_ITEMS, ge=MIN_MAX_ITEMS, le=MAX_MAX_ITEMS, strict=True, alias="maxItems"
    )


class GetRoleInput(ToolInput):
    role_name: str = Field(min_length=1, strict=True, alias="roleName")


class ListPoliciesInput(ToolInput):
    scope: PolicyScope = "Local"
    max_items: int = Field(
        default=DEFAULT_MAX_ITEMS, ge=MIN_MAX_ITEMS, le=MAX_MAX_ITEMS, strict=True, alias="maxItems"
    )


class GetPolicyInput(ToolInput):
    policy_arn: str = Field(min_length=1, strict=True, alias="policyArn")


class AssumeRoleInput(ToolInput):
    role_arn: str = Field(min_length=1, strict=True, alias="roleArn")
    session_duration: int = Field(
        default=DEFAULT_SESSION_DURATION,
        ge=MIN_SESSION_DURATION,
        le=MAX_SESSION_DURATION,
        strict=True,
        alias="sessionDuration",
    )


class GetCallerIdentityInput(ToolInput):
    pass


def _max_items(what: str) -> dict[str, object]:
    return {
        "type": "integer",
        "minimum": MIN_MAX_ITEMS,
        "maximum": MAX_MAX_ITEMS,
        "default": DEFAULT_MAX_ITEMS,
        "description": f"Maximum number of {what} to return (default: {DEFAULT_MAX_ITEMS}).",
    }


def _required_string(description: str) -> dict[str, object]:
    return {"type": "string", "minLength": 1, "description": description}


EMPTY_SCHEMA: dict[str, object] = {"type": "object", "properties": {}}

LIST_OBJECTS_SCHEMA = {
    "type": "object",
    "properties": {
        "bucket": _required_string("The name of the S3 bucket"),
        "prefix": {"type": "string", "description": "Optional prefix to filter objects"},
        "maxKeys": _max_items("keys"),
    },
    "required": ["bucket"],
}

GET_OBJECT_SCHEMA = {
    "type": "object",
    "properties": {
        "bucket": _required_string("The name of the S3 bucket"),
        "key": _required_string("The key of the object"),
    },
    "required": ["bucket", "key"],
}

GET_BUCKET_POLICY_SCHEMA = {
    "type": "object",
    "properties": {"bucket": _required_string("The name of the S3 bucket")},
    "required": ["bucket"],
}

LIST_USERS_SCHEMA = {"type": "object", "properties": {"maxItems": _max_items("users")}}

GET_USER_SCHEMA = {
    "type": "object",
    "properties": {"userName": _required_string("The name of the IAM user")},
    "required": ["userName"],
}

LIST_ROLES_SCHEMA = {"type": "object", "properties": {"maxItems": _max_items("roles")}}

GET_ROLE_SCHEMA = {
    "type": "object",
    "properties": {"roleName": _required_string("The name of the IAM role")},
    "required": ["roleName"],
}

LIST_POLICIES_SCHEMA = {
    "type": "object",
    "properties": {
        "scope": {
            "type": "string",
            "enum": ["All", "AWS", "Local"],
            "default": "Local",
            "description": (
                "The scope of policies to list: 'AWS' for AWS managed policies, "
                "'Local' for customer managed policies, 'All' for both."
            ),
        },
        "maxItems": _max_items("policies"),
    },
}

GET_POLICY_SCHEMA = {
    "type": "object",
    "properties": {"policyArn": _required_string("The ARN of the IAM policy")},
    "required": ["policyArn"],
}

ASSUME_ROLE_SCHEMA = {
    "type": "object",
    "properties": {
        "roleArn": _required_string("The ARN of the IAM role to assume"),
        "sessionDuration": {
            "type": "integer",
            "minimum": MIN_SESSION_DURATION,
            "maximum": MAX_SESSION_DURATION,
            "default": DEFAULT_SESSION_DURATION,
            "description": (
                f"The duration in seconds for the session "
                f"({MIN_SESSION_DURATION}-{MAX_SESSION_DURATION})"
            ),
        },
    },
    "required": ["roleArn"],
}

INPUT_MODELS: dict[str, type[ToolInput]] = {
    "list_s3_buckets": ListBucketsInput,
    "list_s3_objects": ListObjectsInput,
    "get_s3_object": GetObjectInput,
    "get_s3_bucket_policy": GetBucketPolicyInput,
    "list_iam_users": ListUsersInput,
    "get_iam_user": GetUserInput,
    "list_iam_roles": ListRolesInput,
    "get_iam_role": GetRoleInput,
    "list_iam_policies": ListPoliciesInput,
    "get_iam_policy": GetPolicyInput,
    "assume_iam_role": AssumeRoleInput,
    "get_caller_identity": GetCallerIdentityInput,
}


def _describe(error: Mapping[str, object]) -> str:
    loc = error.get("loc") or ()
    field = ".".join(str(part) for part in loc) if isinstance(loc, tuple) else str(loc)
    message = str(error.get("msg", "invalid value"))
    return f"{field}: {message}" if field else message


def validate_input(
    model: type[ToolInput], raw_arguments: Mapping[str, object]
) -> ToolInput | ValidationFailure:
    try:
        return model.model_validate(dict(raw_arguments))
    except ValidationError as exc:
        errors = [_describe(error) for error in exc.errors()]
        return ValidationFailure("Input validation failed: " + "; ".join(errors), errors=errors)


def validate(tool_name: str, raw_arguments: Mapping[str, object]) -> ToolInput | ValidationFailure:
    """Validate ``raw_arguments`` for ``tool_name``.

    Returns the populated input model, with documented defaults filled in, or
    a ``ValidationFailure`` naming each offending field and rule.
    """
    model = INPUT_MODELS.get(tool_name)
    if model is None:
        return ValidationFailure(f"No input schema registered for tool: {tool_name}")
    return validate_input(model, raw_arguments)
