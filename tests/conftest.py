from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from aws_readonly_mcp import config
from aws_readonly_mcp.dispatcher import Dispatcher
from aws_readonly_mcp.providers import IAMAdapter, S3Adapter, STSAdapter
from aws_readonly_mcp.providers.models import AssumedCredentials
from aws_readonly_mcp.session import SessionManager

EXPIRATION = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


def make_credentials(suffix: str = "1") -> AssumedCredentials:
    return AssumedCredentials(
        access_key_id=f"ASIAEXAMPLE{suffix}",
        secret_access_key=f"secret-{suffix}",
        session_token=f"token-{suffix}",
        expiration=EXPIRATION,
    )


@pytest.fixture
def storage() -> MagicMock:
    return MagicMock(spec=S3Adapter)


@pytest.fixture
def identity() -> MagicMock:
    return MagicMock(spec=IAMAdapter)


@pytest.fixture
def issuer() -> MagicMock:
    return MagicMock(spec=STSAdapter)


@pytest.fixture
def storage_factory(storage: MagicMock) -> MagicMock:
    return MagicMock(return_value=storage)


@pytest.fixture
def identity_factory(identity: MagicMock) -> MagicMock:
    return MagicMock(return_value=identity)


@pytest.fixture
def session(
    issuer: MagicMock,
    storage_factory: MagicMock,
    identity_factory: MagicMock,
) -> SessionManager:
    return SessionManager(
        "us-east-1",
        issuer=issuer,
        storage_factory=storage_factory,
        identity_factory=identity_factory,
        session_name_factory=lambda: "aws-mcp-readonly-1700000000000",
    )


@pytest.fixture
def dispatcher(session: SessionManager) -> Dispatcher:
    return Dispatcher(session)


@pytest.fixture
def credentials_factory():
    return make_credentials
