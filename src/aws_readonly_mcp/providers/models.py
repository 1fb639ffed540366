"""Records returned by the provider adapters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CredentialSet:
    """Explicit AWS credential triple. ``None`` in its place means the ambient chain."""

    access_key_id: str
    secret_access_key: str
    session_token: str

    def __repr__(self) -> str:
        return f"CredentialSet(access_key_id={self.access_key_id[:8]}***)"


@dataclass(frozen=True)
class AssumedCredentials:
    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    @property
    def credential_set(self) -> CredentialSet:
        return CredentialSet(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            session_token=self.session_token,
        )

    def __repr__(self) -> str:
        return (
            f"AssumedCredentials(access_key_id={self.access_key_id[:8]}***, "
            f"expiration={self.expiration.isoformat()})"
        )


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    account: str
    arn: str


@dataclass(frozen=True)
class BucketInfo:
    name: str
    creation_date: datetime | None = None


@dataclass(frozen=True)
class ObjectInfo:
    key: str
    size: int | None = None
    last_modified: datetime | None = None
    e_tag: str | None = None


@dataclass(frozen=True)
class UserInfo:
    user_name: str
    user_id: str
    arn: str
    create_date: datetime | None = None
    password_last_used: datetime | None = None


@dataclass(frozen=True)
class RoleInfo:
    role_name: str
    role_id: str
    arn: str
    create_date: datetime | None = None
    description: str | None = None


@dataclass(frozen=True)
class PolicyInfo:
    policy_name: str
    policy_id: str
    arn: str
    create_date: datetime | None = None
    description: str | None = None
