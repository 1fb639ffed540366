"""Read-only S3 adapter."""

from __future__ import annotations

import logging
from typing import Any

from aws_readonly_mcp.errors import NotFoundError, ToolError
from aws_readonly_mcp.providers.base import DEFAULT_TIMEOUT_SECONDS, call_aws, create_client
from aws_readonly_mcp.providers.models import BucketInfo, CredentialSet, ObjectInfo

logger = logging.getLogger(__name__)

_NO_POLICY_CODE = "NoSuchBucketPolicy"


class S3Adapter:
    """Bucket and object queries bound to one region and credential set."""

    def __init__(
        self,
        region: str,
        credentials: CredentialSet | None = None,
        *,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.region = region
        self.credentials = credentials
        self._client: Any = create_client("s3", region, credentials, timeout_seconds)

    async def list_buckets(self) -> list[BucketInfo]:
        logger.debug("Listing S3 buckets")
        try:
            response = await call_aws(self._client.list_buckets)
        except ToolError as exc:
            logger.error("Failed to list buckets: %s", exc.message)
            raise
        return [
            BucketInfo(name=bucket["Name"], creation_date=bucket.get("CreationDate"))
            for bucket in response.get("Buckets", [])
        ]

    async def list_objects(
        self,
        bucket: str,
        prefix: str | None = None,
        max_keys: int = 100,
    ) -> list[ObjectInfo]:
        logger.debug("Listing S3 objects: bucket=%s prefix=%s max_keys=%d", bucket, prefix, max_keys)
        params: dict[str, object] = {"Bucket": bucket, "MaxKeys": max_keys}
        if prefix is not None:
            params["Prefix"] = prefix
        try:
            response = await call_aws(self._client.list_objects_v2, **params)
        except ToolError as exc:
            logger.error("Failed to list objects in %s: %s", bucket, exc.message)
            raise
        return [
            ObjectInfo(
                key=obj["Key"],
                size=obj.get("Size"),
                last_modified=obj.get("LastModified"),
                e_tag=obj.get("ETag"),
            )
            for obj in response.get("Contents", [])
        ]

    async def get_object(self, bucket: str, key: str) -> str:
        """Return the object body decoded as UTF-8 text."""
        logger.debug("Getting S3 object: bucket=%s key=%s", bucket, key)
        try:
            response = await call_aws(self._client.get_object, Bucket=bucket, Key=key)
            body = response.get("Body")
            if body is None:
                raise NotFoundError("No body in response")
            content = await call_aws(body.read)
        except ToolError as exc:
            logger.error("Failed to get object %s/%s: %s", bucket, key, exc.message)
            raise
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="replace")
        return str(content)

    async def get_bucket_policy(self, bucket: str) -> str:
        """Return the policy document text, or ``""`` when the bucket has none."""
        logger.debug("Getting bucket policy: bucket=%s", bucket)
        try:
            response = await call_aws(self._client.get_bucket_policy, Bucket=bucket)
        except ToolError as exc:
            if exc.code == _NO_POLICY_CODE:
                logger.debug("No bucket policy found: bucket=%s", bucket)
                return ""
            logger.error("Failed to get bucket policy for %s: %s", bucket, exc.message)
            raise
        return response.get("Policy") or ""
