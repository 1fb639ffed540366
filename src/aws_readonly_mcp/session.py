"""Credential session state and the adapter set it controls.

The session manager owns the only mutable state in the server: which
credentials the S3 and IAM adapters sign with. Handlers read
``SessionManager.adapters`` once at entry and use that snapshot for the whole
call. A role assumption builds a new snapshot and publishes it with one
reference assignment, so a reader sees either the old pair of adapters or the
new pair, never one of each.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from aws_readonly_mcp.config import DEFAULT_SESSION_DURATION
from aws_readonly_mcp.providers.iam import IAMAdapter
from aws_readonly_mcp.providers.models import AssumedCredentials, CredentialSet
from aws_readonly_mcp.providers.s3 import S3Adapter
from aws_readonly_mcp.providers.sts import STSAdapter
from aws_readonly_mcp.utils.time import session_name

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[str, Union[CredentialSet, None]], Any]


@dataclass(frozen=True)
class Unassumed:
    """Ambient credentials; the initial state."""

    @property
    def credentials(self) -> None:
        return None


@dataclass(frozen=True)
class Assumed:
    credentials: CredentialSet
    expiration: datetime
    role_arn: str


SessionState = Union[Unassumed, Assumed]


@dataclass(frozen=True)
class AdapterSet:
    """Storage and identity adapters built from the same credentials."""

    generation: int
    storage: S3Adapter
    identity: IAMAdapter
    credentials: CredentialSet | None = None


class SessionManager:
    """Holds the active credential session and performs role assumption.

    Expiration of an assumed session is recorded but not enforced: calls keep
    using the credentials until AWS itself rejects them.
    """

    def __init__(
        self,
        region: str,
        *,
        issuer: STSAdapter | None = None,
        storage_factory: AdapterFactory = S3Adapter,
        identity_factory: AdapterFactory = IAMAdapter,
        session_name_factory: Callable[[], str] = session_name,
    ) -> None:
        self._region = region
        self._storage_factory = storage_factory
        self._identity_factory = identity_factory
        self._session_name_factory = session_name_factory
        self._issuer = issuer if issuer is not None else STSAdapter(region)
        self._lock = threading.Lock()
        self._state: SessionState = Unassumed()
        self._adapters = self._build_adapters(0, None)

    @property
    def region(self) -> str:
        return self._region

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def adapters(self) -> AdapterSet:
        return self._adapters

    @property
    def issuer(self) -> STSAdapter:
        return self._issuer

    def _build_adapters(self, generation: int, credentials: CredentialSet | None) -> AdapterSet:
        return AdapterSet(
            generation=generation,
            storage=self._storage_factory(self._region, credentials),
            identity=self._identity_factory(self._region, credentials),
            credentials=credentials,
        )

    def _publish(self, credentials: CredentialSet, state: SessionState | None) -> AdapterSet:
        with self._lock:
            adapters = self._build_adapters(self._adapters.generation + 1, credentials)
            self._adapters = adapters
            if state is not None:
                self._state = state
        return adapters

    def rebuild_adapters(self, credentials: CredentialSet) -> AdapterSet:
        """Rebuild storage and identity adapters with ``credentials`` and swap them in.

        Only the adapter set changes. ``state`` is left as it was, so after
        this call ``adapters.credentials`` may differ from
        ``state.credentials``; role switches that should be visible in the
        session state go through ``assume_role``.
        """
        adapters = self._publish(credentials, None)
        logger.info("Updated services with new credentials (generation=%d)", adapters.generation)
        return adapters

    async def assume_role(
        self,
        role_arn: str,
        session_duration: int = DEFAULT_SESSION_DURATION,
    ) -> AssumedCredentials:
        """Assume ``role_arn`` and make its credentials the active session.

        On any failure the previous state and adapters stay in place and the
        error propagates to the caller.
        """
        assumed = await self._issuer.assume_role(
            role_arn, self._session_name_factory(), session_duration
        )
        state = Assumed(
            credentials=assumed.credential_set,
            expiration=assumed.expiration,
            role_arn=role_arn,
        )
        adapters = self._publish(assumed.credential_set, state)
        logger.info(
            "Session now uses role %s until %s (generation=%d)",
            role_arn,
            assumed.expiration.isoformat(),
            adapters.generation,
        )
        return assumed
