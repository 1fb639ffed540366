"""boto3-backed adapters for S3, IAM and STS."""

from aws_readonly_mcp.providers.iam import IAMAdapter
from aws_readonly_mcp.providers.models import (
    AssumedCredentials,
    BucketInfo,
    CallerIdentity,
    CredentialSet,
    ObjectInfo,
    PolicyInfo,
    RoleInfo,
    UserInfo,
)
from aws_readonly_mcp.providers.s3 import S3Adapter
from aws_readonly_mcp.providers.sts import STSAdapter

__all__ = [
    "AssumedCredentials",
    "BucketInfo",
    "CallerIdentity",
    "CredentialSet",
    "IAMAdapter",
    "ObjectInfo",
    "PolicyInfo",
    "RoleInfo",
    "S3Adapter",
    "STSAdapter",
    "UserInfo",
]
