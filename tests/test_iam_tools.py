from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from aws_readonly_mcp.dispatcher import Dispatcher
from aws_readonly_mcp.errors import NotFoundError
from aws_readonly_mcp.providers.models import PolicyInfo, RoleInfo, UserInfo

CREATED = datetime(2023, 6, 1, tzinfo=timezone.utc)


def _payload(result) -> dict[str, object]:
    return json.loads(result.content[0]["text"])


@pytest.mark.asyncio
async def test_get_user(dispatcher: Dispatcher, identity: MagicMock) -> None:
    identity.get_user.return_value = UserInfo(
        user_name="john-doe",
        user_id="AIDAEXAMPLE",
        arn="arn:aws:iam::123456789012:user/john-doe",
        create_date=CREATED,
    )

    result = await dispatcher.dispatch("get_iam_user", {"userName": "john-doe"})

    identity.get_user.assert_awaited_once_with("john-doe")
    assert _payload(result) == {
        "userName": "john-doe",
        "userId": "AIDAEXAMPLE",
        "arn": "arn:aws:iam::123456789012:user/john-doe",
        "createDate": "2023-06-01T00:00:00+00:00",
    }


@pytest.mark.asyncio
async def test_get_user_not_found(dispatcher: Dispatcher, identity: MagicMock) -> None:
    identity.get_user.side_effect = NotFoundError("User ghost not found")

    result = await dispatcher.dispatch("get_iam_user", {"userName": "ghost"})

    assert result.is_error is True
    assert _payload(result) == {"error": "User ghost not found"}


@pytest.mark.asyncio
async def test_list_roles(dispatcher: Dispatcher, identity: MagicMock) -> None:
    identity.list_roles.return_value = [
        RoleInfo(role_name="admin", role_id="AROA1", arn="arn:aws:iam::1:role/admin",
                 description="Administrators"),
    ]

    result = await dispatcher.dispatch("list_iam_roles", {})

    identity.list_roles.assert_awaited_once_with(100)
    payload = _payload(result)
    assert payload["count"] == 1
    assert payload["roles"][0] == {
        "roleName": "admin",
        "roleId": "AROA1",
        "arn": "arn:aws:iam::1:role/admin",
        "description": "Administrators",
    }


@pytest.mark.asyncio
async def test_get_role(dispatcher: Dispatcher, identity: MagicMock) -> None:
    identity.get_role.return_value = RoleInfo(
        role_name="admin", role_id="AROA1", arn="arn:aws:iam::1:role/admin"
    )

    result = await dispatcher.dispatch("get_iam_role", {"roleName": "admin"})

    assert _payload(result)["roleName"] == "admin"


@pytest.mark.asyncio
async def test_list_policies_uses_local_scope_by_default(
    dispatcher: Dispatcher, identity: MagicMock
) -> None:
    identity.list_policies.return_value = [
        PolicyInfo(policy_name="ReadOnly", policy_id="ANPA1", arn="arn:aws:iam::1:policy/ReadOnly"),
    ]

    result = await dispatcher.dispatch("list_iam_policies", {})

    identity.list_policies.assert_awaited_once_with("Local", 100)
    payload = _payload(result)
    assert payload["scope"] == "Local"
    assert payload["count"] == 1
    assert payload["policies"][0]["policyName"] == "ReadOnly"


@pytest.mark.asyncio
async def test_list_policies_with_aws_scope(dispatcher: Dispatcher, identity: MagicMock) -> None:
    identity.list_policies.return_value = []

    result = await dispatcher.dispatch("list_iam_policies", {"scope": "AWS", "maxItems": 5})

    identity.list_policies.assert_awaited_once_with("AWS", 5)
    assert _payload(result) == {"scope": "AWS", "policies": [], "count": 0}


@pytest.mark.asyncio
async def test_get_policy(dispatcher: Dispatcher, identity: MagicMock) -> None:
    arn = "arn:aws:iam::123456789012:policy/MyPolicy"
    identity.get_policy.return_value = PolicyInfo(
        policy_name="MyPolicy", policy_id="ANPA2", arn=arn, description="Mine"
    )

    result = await dispatcher.dispatch("get_iam_policy", {"policyArn": arn})

    identity.get_policy.assert_awaited_once_with(arn)
    assert _payload(result)["description"] == "Mine"
