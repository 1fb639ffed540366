"""STS tool handlers: role assumption and caller identity."""

from __future__ import annotations

import logging

from aws_readonly_mcp.session import SessionManager
from aws_readonly_mcp.tools._schemas import (
    ASSUME_ROLE_SCHEMA,
    EMPTY_SCHEMA,
    AssumeRoleInput,
    GetCallerIdentityInput,
)
from aws_readonly_mcp.tools.base import ToolSpec, tool_handler
from aws_readonly_mcp.utils.masking import redact_sensitive_fields

logger = logging.getLogger(__name__)


@tool_handler
async def assume_iam_role(session: SessionManager, args: AssumeRoleInput) -> dict[str, object]:
    """Assume a role and switch the session's S3 and IAM adapters to it."""
    logger.info(
        "Tool: assume_iam_role roleArn=%s sessionDuration=%d",
        args.role_arn,
        args.session_duration,
    )
    creds = await session.assume_role(args.role_arn, args.session_duration)
    payload: dict[str, object] = {
        "roleArn": args.role_arn,
        "accessKeyId": creds.access_key_id,
        "secretAccessKey": creds.secret_access_key,
        "sessionToken": creds.session_token,
        "expiration": creds.expiration.isoformat(),
    }
    logger.debug("assume_iam_role result: %s", redact_sensitive_fields(payload))
    return payload


@tool_handler
async def get_caller_identity(
    session: SessionManager, args: GetCallerIdentityInput
) -> dict[str, object]:
    logger.info("Tool: get_caller_identity")
    identity = await session.issuer.get_caller_identity()
    return {"userId": identity.user_id, "account": identity.account, "arn": identity.arn}


assume_iam_role_tool = ToolSpec(
    name="assume_iam_role",
    description=(
        "Assume an IAM role and get temporary security credentials. "
        "Subsequent S3 and IAM tool calls use the assumed role."
    ),
    input_schema=ASSUME_ROLE_SCHEMA,
    input_model=AssumeRoleInput,
    handler=assume_iam_role,
)

get_caller_identity_tool = ToolSpec(
    name="get_caller_identity",
    description="Get the account, user ID and ARN of the ambient AWS credentials",
    input_schema=EMPTY_SCHEMA,
    input_model=GetCallerIdentityInput,
    handler=get_caller_identity,
)
