"""boto3 client construction and blocking-call helpers shared by the adapters."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from aws_readonly_mcp.errors import provider_failure_from
from aws_readonly_mcp.providers.models import CredentialSet

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 30


def _service_config(service: str, timeout_seconds: int) -> Config:
    base: dict[str, object] = {
        "read_timeout": timeout_seconds,
        "connect_timeout": timeout_seconds,
        "retries": {"max_attempts": 3, "mode": "standard"},
    }
    if service == "s3":
        base["request_checksum_calculation"] = "when_required"
        base["response_checksum_validation"] = "when_required"
    return Config(**base)


def create_client(
    service: str,
    region: str,
    credentials: CredentialSet | None = None,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """Build a boto3 client from explicit credentials or the ambient chain."""
    if credentials is None:
        session = boto3.Session(region_name=region)
    else:
        session = boto3.Session(
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
            aws_session_token=credentials.session_token,
            region_name=region,
        )
    return session.client(service, config=_service_config(service, timeout_seconds))


async def call_aws(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a blocking boto3 call in a worker thread, mapping botocore errors."""
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except (ClientError, BotoCoreError) as exc:
        raise provider_failure_from(exc) from exc
