"""Single-use OAuth state nonces."""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from shopbridge.common.models import as_utc, utcnow
from shopbridge.oauth.models import AuthorizationStateModel


@dataclass
class ConsumedState:
    nonce: str
    tenant_id: str
    issued_at: datetime
    expires_at: datetime

    def matches(self, tenant_id: str, now: datetime | None = None) -> bool:
        """True if the state was issued for ``tenant_id`` and has not expired."""
        now = now or utcnow()
        return self.tenant_id == tenant_id and self.expires_at > now


class StateStore:
    """Issues nonces and consumes them at most once."""

    def __init__(self, ttl_seconds: int = 600):
        self.ttl = timedelta(seconds=ttl_seconds)

    async def issue(
        self, session: AsyncSession, tenant_id: str
    ) -> AuthorizationStateModel:
        now = utcnow()
        state = AuthorizationStateModel(
            nonce=secrets.token_hex(16),
            tenant_id=tenant_id,
            issued_at=now,
            expires_at=now + self.ttl,
        )
        session.add(state)
        await session.flush()
        return state

    async def consume(self, session: AsyncSession, nonce: str) -> ConsumedState | None:
        """Delete the nonce and return what it was bound to.

        The delete and the read are one statement, so when two callbacks race
        with the same nonce only one of them gets a row back.
        """
        stmt = (
            delete(AuthorizationStateModel)
            .where(AuthorizationStateModel.nonce == nonce)
            .returning(
                AuthorizationStateModel.tenant_id,
                AuthorizationStateModel.issued_at,
                AuthorizationStateModel.expires_at,
            )
            .execution_options(synchronize_session=False)
        )
        row = (await session.execute(stmt)).first()
        if row is None:
            return None
        return ConsumedState(
            nonce=nonce,
            tenant_id=row.tenant_id,
            issued_at=as_utc(row.issued_at),
            expires_at=as_utc(row.expires_at),
        )

    async def purge_expired(self, session: AsyncSession) -> int:
        result = await session.execute(
            delete(AuthorizationStateModel)
            .where(AuthorizationStateModel.expires_at <= utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_for_tenant(self, session: AsyncSession, tenant_id: str) -> int:
        result = await session.execute(
            delete(AuthorizationStateModel)
            .where(AuthorizationStateModel.tenant_id == tenant_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
