"""STS adapter: role assumption and caller identity.

Always signs with the ambient credential chain (environment, profile,
instance role). It is never rebuilt when a role is assumed.
"""

from __future__ import annotations

import logging
from typing import Any

from aws_readonly_mcp.errors import NoCredentialsReturnedError, ToolError
from aws_readonly_mcp.providers.base import DEFAULT_TIMEOUT_SECONDS, call_aws, create_client
from aws_readonly_mcp.providers.models import AssumedCredentials, CallerIdentity

logger = logging.getLogger(__name__)

_UNKNOWN = "unknown"


class STSAdapter:
    def __init__(self, region: str, *, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.region = region
        self._client: Any = create_client("sts", region, None, timeout_seconds)

    async def assume_role(
        self,
        role_arn: str,
        session_name: str,
        duration_seconds: int,
    ) -> AssumedCredentials:
        """Exchange ``role_arn`` for temporary credentials.

        Raises:
            NoCredentialsReturnedError: STS answered without a ``Credentials`` block.
            ProviderFailure: STS rejected the request.
        """
        logger.info("Assuming role: %s, session=%s", role_arn, session_name)
        try:
            response = await call_aws(
                self._client.assume_role,
                RoleArn=role_arn,
                RoleSessionName=session_name,
                DurationSeconds=duration_seconds,
            )
            creds = response.get("Credentials")
            if not creds:
                raise NoCredentialsReturnedError()
        except ToolError as exc:
            logger.error("Failed to assume role %s: %s", role_arn, exc.message)
            raise

        return AssumedCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expiration=creds["Expiration"],
        )

    async def get_caller_identity(self) -> CallerIdentity:
        logger.info("Getting caller identity")
        try:
            response = await call_aws(self._client.get_caller_identity)
        except ToolError as exc:
            logger.error("Failed to get caller identity: %s", exc.message)
            raise
        return CallerIdentity(
            user_id=response.get("UserId") or _UNKNOWN,
            account=response.get("Account") or _UNKNOWN,
            arn=response.get("Arn") or _UNKNOWN,
        )
