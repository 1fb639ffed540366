"""IAM tool handlers."""

from __future__ import annotations

import logging

from aws_readonly_mcp.providers.models import PolicyInfo, RoleInfo, UserInfo
from aws_readonly_mcp.session import SessionManager
from aws_readonly_mcp.tools._schemas import (
    GET_POLICY_SCHEMA,
    GET_ROLE_SCHEMA,
    GET_USER_SCHEMA,
    LIST_POLICIES_SCHEMA,
    LIST_ROLES_SCHEMA,
    LIST_USERS_SCHEMA,
    GetPolicyInput,
    GetRoleInput,
    GetUserInput,
    ListPoliciesInput,
    ListRolesInput,
    ListUsersInput,
)
from aws_readonly_mcp.tools.base import ToolSpec, tool_handler
from aws_readonly_mcp.utils.serialization import compact, iso_or_none

logger = logging.getLogger(__name__)


def _user_payload(user: UserInfo) -> dict[str, object]:
    return compact(
        {
            "userName": user.user_name,
            "userId": user.user_id,
            "arn": user.arn,
            "createDate": iso_or_none(user.create_date),
            "passwordLastUsed": iso_or_none(user.password_last_used),
        }
    )


def _role_payload(role: RoleInfo) -> dict[str, object]:
    return compact(
        {
            "roleName": role.role_name,
            "roleId": role.role_id,
            "arn": role.arn,
            "createDate": iso_or_none(role.create_date),
            "description": role.description,
        }
    )


def _policy_payload(policy: PolicyInfo) -> dict[str, object]:
    return compact(
        {
            "policyName": policy.policy_name,
            "policyId": policy.policy_id,
            "arn": policy.arn,
            "createDate": iso_or_none(policy.create_date),
            "description": policy.description,
        }
    )


@tool_handler
async def list_iam_users(session: SessionManager, args: ListUsersInput) -> dict[str, object]:
    identity = session.adapters.identity
    logger.info("Tool: list_iam_users")
    users = await identity.list_users(args.max_items)
    return {"users": [_user_payload(u) for u in users], "count": len(users)}


@tool_handler
async def get_iam_user(session: SessionManager, args: GetUserInput) -> dict[str, object]:
    identity = session.adapters.identity
    logger.info("Tool: get_iam_user userName=%s", args.user_name)
    return _user_payload(await identity.get_user(args.user_name))


@tool_handler
async def list_iam_roles(session: SessionManager, args: ListRolesInput) -> dict[str, object]:
    identity = session.adapters.identity
    logger.info("Tool: list_iam_roles")
    roles = await identity.list_roles(args.max_items)
    return {"roles": [_role_payload(r) for r in roles], "count": len(roles)}


@tool_handler
async def get_iam_role(session: SessionManager, args: GetRoleInput) -> dict[str, object]:
    identity = session.adapters.identity
    logger.info("Tool: get_iam_role roleName=%s", args.role_name)
    return _role_payload(await identity.get_role(args.role_name))


@tool_handler
async def list_iam_policies(
    session: SessionManager, args: ListPoliciesInput
) -> dict[str, object]:
    identity = session.adapters.identity
    logger.info("Tool: list_iam_policies scope=%s", args.scope)
    policies = await identity.list_policies(args.scope, args.max_items)
    return {
        "scope": args.scope,
        "policies": [_policy_payload(p) for p in policies],
        "count": len(policies),
    }


@tool_handler
async def get_iam_policy(session: SessionManager, args: GetPolicyInput) -> dict[str, object]:
    identity = session.adapters.identity
    logger.info("Tool: get_iam_policy policyArn=%s", args.policy_arn)
    return _policy_payload(await identity.get_policy(args.policy_arn))


list_iam_users_tool = ToolSpec(
    name="list_iam_users",
    description="List IAM users in the AWS account",
    input_schema=LIST_USERS_SCHEMA,
    input_model=ListUsersInput,
    handler=list_iam_users,
)

get_iam_user_tool = ToolSpec(
    name="get_iam_user",
    description="Get details of a specific IAM user",
    input_schema=GET_USER_SCHEMA,
    input_model=GetUserInput,
    handler=get_iam_user,
)

list_iam_roles_tool = ToolSpec(
    name="list_iam_roles",
    description="List IAM roles in the AWS account",
    input_schema=LIST_ROLES_SCHEMA,
    input_model=ListRolesInput,
    handler=list_iam_roles,
)

get_iam_role_tool = ToolSpec(
    name="get_iam_role",
    description="Get details of a specific IAM role",
    input_schema=GET_ROLE_SCHEMA,
    input_model=GetRoleInput,
    handler=get_iam_role,
)

list_iam_policies_tool = ToolSpec(
    name="list_iam_policies",
    description="List IAM policies in the AWS account",
    input_schema=LIST_POLICIES_SCHEMA,
    input_model=ListPoliciesInput,
    handler=list_iam_policies,
)

get_iam_policy_tool = ToolSpec(
    name="get_iam_policy",
    description="Get details of a specific IAM policy",
    input_schema=GET_POLICY_SCHEMA,
    input_model=GetPolicyInput,
    handler=get_iam_policy,
)
