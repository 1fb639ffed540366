"""Read-only IAM adapter."""

from __future__ import annotations

import logging
from typing import Any

from aws_readonly_mcp.errors import NotFoundError, ToolError
from aws_readonly_mcp.providers.base import DEFAULT_TIMEOUT_SECONDS, call_aws, create_client
from aws_readonly_mcp.providers.models import CredentialSet, PolicyInfo, RoleInfo, UserInfo

logger = logging.getLogger(__name__)


def _user(record: dict[str, Any]) -> UserInfo:
    return UserInfo(
        user_name=record["UserName"],
        user_id=record["UserId"],
        arn=record["Arn"],
        create_date=record.get("CreateDate"),
        password_last_used=record.get("PasswordLastUsed"),
    )


def _role(record: dict[str, Any]) -> RoleInfo:
    return RoleInfo(
        role_name=record["RoleName"],
        role_id=record["RoleId"],
        arn=record["Arn"],
        create_date=record.get("CreateDate"),
        description=record.get("Description"),
    )


def _policy(record: dict[str, Any]) -> PolicyInfo:
    return PolicyInfo(
        policy_name=record["PolicyName"],
        policy_id=record["PolicyId"],
        arn=record["Arn"],
        create_date=record.get("CreateDate"),
        description=record.get("Description"),
    )


class IAMAdapter:
    """User, role and managed-policy queries.

    IAM is a global service; ``region`` only selects the endpoint partition.
    """

    def __init__(
        self,
        region: str,
        credentials: CredentialSet | None = None,
        *,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.region = region
        self.credentials = credentials
        self._client: Any = create_client("iam", region, credentials, timeout_seconds)

    async def _send(self, action: str, method: str, **params: object) -> dict[str, Any]:
        try:
            return await call_aws(getattr(self._client, method), **params)
        except ToolError as exc:
            logger.error("Failed to %s: %s", action, exc.message)
            raise

    async def list_users(self, max_items: int = 100) -> list[UserInfo]:
        logger.debug("Listing IAM users: max_items=%d", max_items)
        response = await self._send("list users", "list_users", MaxItems=max_items)
        return [_user(item) for item in response.get("Users", [])]

    async def get_user(self, user_name: str) -> UserInfo:
        logger.debug("Getting IAM user: %s", user_name)
        response = await self._send("get user", "get_user", UserName=user_name)
        if not response.get("User"):
            raise NotFoundError(f"User {user_name} not found")
        return _user(response["User"])

    async def list_roles(self, max_items: int = 100) -> list[RoleInfo]:
        logger.debug("Listing IAM roles: max_items=%d", max_items)
        response = await self._send("list roles", "list_roles", MaxItems=max_items)
        return [_role(item) for item in response.get("Roles", [])]

    async def get_role(self, role_name: str) -> RoleInfo:
        logger.debug("Getting IAM role: %s", role_name)
        response = await self._send("get role", "get_role", RoleName=role_name)
        if not response.get("Role"):
            raise NotFoundError(f"Role {role_name} not found")
        return _role(response["Role"])

    async def list_policies(self, scope: str = "Local", max_items: int = 100) -> list[PolicyInfo]:
        logger.debug("Listing IAM policies: scope=%s max_items=%d", scope, max_items)
        response = await self._send(
            "list policies", "list_policies", Scope=scope, MaxItems=max_items
        )
        return [_policy(item) for item in response.get("Policies", [])]

    async def get_policy(self, policy_arn: str) -> PolicyInfo:
        logger.debug("Getting IAM policy: %s", policy_arn)
        response = await self._send("get policy", "get_policy", PolicyArn=policy_arn)
        if not response.get("Policy"):
            raise NotFoundError(f"Policy {policy_arn} not found")
        return _policy(response["Policy"])
