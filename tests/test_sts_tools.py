from __future__ import annotations

import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from aws_readonly_mcp.dispatcher import Dispatcher
from aws_readonly_mcp.errors import NoCredentialsReturnedError
from aws_readonly_mcp.providers import IAMAdapter
from aws_readonly_mcp.providers.models import CallerIdentity, CredentialSet, UserInfo
from aws_readonly_mcp.session import Assumed

ROLE_ARN = "arn:aws:iam::123456789012:role/test-role"


def _payload(result) -> dict[str, object]:
    return json.loads(result.content[0]["text"])


@pytest.mark.asyncio
async def test_assume_role_end_to_end(
    dispatcher: Dispatcher, issuer: MagicMock, credentials_factory
) -> None:
    issuer.assume_role.return_value = credentials_factory("A")

    result = await dispatcher.dispatch(
        "assume_iam_role", {"roleArn": ROLE_ARN, "sessionDuration": 7200}
    )

    assert not result.is_error
    role_arn, _session_name, duration = issuer.assume_role.await_args.args
    assert role_arn == ROLE_ARN
    assert duration == 7200
    payload = _payload(result)
    assert payload["roleArn"] == ROLE_ARN
    assert payload["accessKeyId"] == "ASIAEXAMPLEA"
    assert payload["secretAccessKey"] == "secret-A"
    assert payload["sessionToken"] == "token-A"
    assert datetime.fromisoformat(payload["expiration"]) == credentials_factory().expiration


@pytest.mark.asyncio
async def test_later_calls_use_assumed_credentials(
    dispatcher: Dispatcher,
    issuer: MagicMock,
    identity_factory: MagicMock,
    credentials_factory,
) -> None:
    new_identity = MagicMock(spec=IAMAdapter)
    new_identity.list_users.return_value = [
        UserInfo(user_name="user1", user_id="AIDA1", arn="arn:aws:iam::1:user/user1")
    ]
    identity_factory.return_value = new_identity
    issuer.assume_role.return_value = credentials_factory("A")

    await dispatcher.dispatch("assume_iam_role", {"roleArn": ROLE_ARN})
    result = await dispatcher.dispatch("list_iam_users", {})

    assert identity_factory.call_args.args == (
        "us-east-1",
        CredentialSet("ASIAEXAMPLEA", "secret-A", "token-A"),
    )
    new_identity.list_users.assert_awaited_once_with(100)
    assert _payload(result)["count"] == 1


@pytest.mark.asyncio
async def test_failed_assume_role_keeps_prior_session(
    dispatcher: Dispatcher, issuer: MagicMock, credentials_factory
) -> None:
    issuer.assume_role.return_value = credentials_factory("A")
    await dispatcher.dispatch("assume_iam_role", {"roleArn": ROLE_ARN})
    prior = dispatcher.session.state

    issuer.assume_role.side_effect = NoCredentialsReturnedError()
    result = await dispatcher.dispatch("assume_iam_role", {"roleArn": ROLE_ARN})

    assert result.is_error is True
    assert "No credentials returned" in _payload(result)["error"]
    assert dispatcher.session.state is prior
    assert isinstance(prior, Assumed)


@pytest.mark.asyncio
async def test_get_caller_identity(dispatcher: Dispatcher, issuer: MagicMock) -> None:
    issuer.get_caller_identity.return_value = CallerIdentity(
        user_id="AIDAEXAMPLE", account="123456789012", arn="arn:aws:iam::123456789012:user/me"
    )

    result = await dispatcher.dispatch("get_caller_identity", {})

    assert _payload(result) == {
        "userId": "AIDAEXAMPLE",
        "account": "123456789012",
        "arn": "arn:aws:iam::123456789012:user/me",
    }
