from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from chainconn.db.session import Base, TimestampMixin, UUIDPrimaryKey


class WalletSessionRecord(UUIDPrimaryKey, TimestampMixin, Base):
    """Persisted wallet credential. One row per slot; the app uses a single slot."""

    __tablename__ = "wallet_sessions"

    slot: Mapped[str] = mapped_column(String(50), unique=True)
    connector: Mapped[str] = mapped_column(String(30))
    account_address: Mapped[str] = mapped_column(String(255))
    chain_id: Mapped[Optional[int]] = mapped_column(Integer, default=None)
