"""S3 tool handlers."""

from __future__ import annotations

import json
import logging

from aws_readonly_mcp.errors import ProviderFailure
from aws_readonly_mcp.session import SessionManager
from aws_readonly_mcp.tools._schemas import (
    EMPTY_SCHEMA,
    GET_BUCKET_POLICY_SCHEMA,
    GET_OBJECT_SCHEMA,
    LIST_OBJECTS_SCHEMA,
    GetBucketPolicyInput,
    GetObjectInput,
    ListBucketsInput,
    ListObjectsInput,
)
from aws_readonly_mcp.tools.base import ToolSpec, tool_handler
from aws_readonly_mcp.utils.serialization import compact, iso_or_none

logger = logging.getLogger(__name__)


@tool_handler
async def list_s3_buckets(session: SessionManager, args: ListBucketsInput) -> dict[str, object]:
    storage = session.adapters.storage
    logger.info("Tool: list_s3_buckets")
    buckets = await storage.list_buckets()
    return {
        "buckets": [
            compact({"name": b.name, "creationDate": iso_or_none(b.creation_date)})
            for b in buckets
        ],
        "count": len(buckets),
    }


@tool_handler
async def list_s3_objects(session: SessionManager, args: ListObjectsInput) -> dict[str, object]:
    storage = session.adapters.storage
    logger.info("Tool: list_s3_objects bucket=%s", args.bucket)
    objects = await storage.list_objects(args.bucket, args.prefix, args.max_keys)
    return compact(
        {
            "bucket": args.bucket,
            "prefix": args.prefix,
            "objects": [
                compact(
                    {
                        "key": obj.key,
                        "size": obj.size,
                        "lastModified": iso_or_none(obj.last_modified),
                        "eTag": obj.e_tag,
                    }
                )
                for obj in objects
            ],
            "count": len(objects),
        }
    )


@tool_handler
async def get_s3_object(session: SessionManager, args: GetObjectInput) -> dict[str, object]:
    storage = session.adapters.storage
    logger.info("Tool: get_s3_object bucket=%s key=%s", args.bucket, args.key)
    content = await storage.get_object(args.bucket, args.key)
    return {"bucket": args.bucket, "key": args.key, "content": content}


@tool_handler
async def get_s3_bucket_policy(
    session: SessionManager, args: GetBucketPolicyInput
) -> dict[str, object]:
    storage = session.adapters.storage
    logger.info("Tool: get_s3_bucket_policy bucket=%s", args.bucket)
    policy = await storage.get_bucket_policy(args.bucket)
    if not policy:
        return {"bucket": args.bucket, "policy": None}
    try:
        document = json.loads(policy)
    except json.JSONDecodeError as exc:
        raise ProviderFailure(f"Bucket policy for {args.bucket} is not valid JSON: {exc}") from exc
    return {"bucket": args.bucket, "policy": document}


list_s3_buckets_tool = ToolSpec(
    name="list_s3_buckets",
    description="List all S3 buckets in the AWS account",
    input_schema=EMPTY_SCHEMA,
    input_model=ListBucketsInput,
    handler=list_s3_buckets,
)

list_s3_objects_tool = ToolSpec(
    name="list_s3_objects",
    description="List objects in an S3 bucket",
    input_schema=LIST_OBJECTS_SCHEMA,
    input_model=ListObjectsInput,
    handler=list_s3_objects,
)

get_s3_object_tool = ToolSpec(
    name="get_s3_object",
    description="Get the content of an S3 object",
    input_schema=GET_OBJECT_SCHEMA,
    input_model=GetObjectInput,
    handler=get_s3_object,
)

get_s3_bucket_policy_tool = ToolSpec(
    name="get_s3_bucket_policy",
    description="Get the policy of an S3 bucket",
    input_schema=GET_BUCKET_POLICY_SCHEMA,
    input_model=GetBucketPolicyInput,
    handler=get_s3_bucket_policy,
)
