from chainconn.db.models.wallet_session import WalletSessionRecord

__all__ = ["WalletSessionRecord"]
