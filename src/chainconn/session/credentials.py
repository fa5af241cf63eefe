"""Where the last wallet credential is kept between runs."""

from abc import ABC, abstractmethod

from chainconn.domain.models.session import StoredCredential


class CredentialStore(ABC):
    @abstractmethod
    async def load(self) -> StoredCredential | None:
        """Return the persisted credential, if any."""

    @abstractmethod
    async def save(self, credential: StoredCredential) -> None:
        """Replace the persisted credential."""

    @abstractmethod
    async def clear(self) -> None:
        """Forget the persisted credential."""


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, credential: StoredCredential | None = None) -> None:
        self._credential = credential

    async def load(self) -> StoredCredential | None:
        return self._credential

    async def save(self, credential: StoredCredential) -> None:
        self._credential = credential

    async def clear(self) -> None:
        self._credential = None
