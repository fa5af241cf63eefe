from chainconn.db.repos.credential_repo import CredentialRepo, SqlCredentialStore

__all__ = ["CredentialRepo", "SqlCredentialStore"]
