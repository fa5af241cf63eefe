from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chainconn.db.models.wallet_session import WalletSessionRecord
from chainconn.domain.enums import ConnectorKind
from chainconn.domain.models.session import StoredCredential
from chainconn.session.credentials import CredentialStore

DEFAULT_SLOT = "default"


class CredentialRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, slot: str = DEFAULT_SLOT) -> Optional[WalletSessionRecord]:
        result = await self._session.execute(
            select(WalletSessionRecord).where(WalletSessionRecord.slot == slot)
        )
        return result.scalar_one_or_none()

    async def upsert(self, credential: StoredCredential, slot: str = DEFAULT_SLOT) -> WalletSessionRecord:
        record = await self.get(slot)
        if record is None:
            record = WalletSessionRecord(slot=slot)
            self._session.add(record)
        record.connector = credential.connector.value
        record.account_address = credential.account_address
        record.chain_id = credential.chain_id
        await self._session.flush()
        return record

    async def delete(self, slot: str = DEFAULT_SLOT) -> None:
        await self._session.execute(delete(WalletSessionRecord).where(WalletSessionRecord.slot == slot))


class SqlCredentialStore(CredentialStore):
    """CredentialStore on top of the wallet_sessions table; each call is its own transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], slot: str = DEFAULT_SLOT) -> None:
        self._session_factory = session_factory
        self._slot = slot

    async def load(self) -> StoredCredential | None:
        async with self._session_factory() as session:
            record = await CredentialRepo(session).get(self._slot)
            if record is None:
                return None
            return StoredCredential(
                connector=ConnectorKind(record.connector),
                account_address=record.account_address,
                chain_id=record.chain_id,
            )

    async def save(self, credential: StoredCredential) -> None:
        async with self._session_factory() as session:
            await CredentialRepo(session).upsert(credential, self._slot)
            await session.commit()

    async def clear(self) -> None:
        async with self._session_factory() as session:
            await CredentialRepo(session).delete(self._slot)
            await session.commit()
