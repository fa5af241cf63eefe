"""ChainRegistry — read-only chain id → ChainDescriptor catalog."""

from collections.abc import Iterable, Mapping, Sequence

from chainconn.domain.enums import Chain
from chainconn.domain.models.chain import ChainDescriptor
from chainconn.exceptions import DuplicateChainIdError, DuplicateChainSlugError, UnknownChainError


class ChainRegistry:
    """Single source of truth for chain metadata.

    Built once from a sequence of descriptors; lookups are pure reads afterwards.
    """

    def __init__(self, descriptors: Mapping[int, ChainDescriptor]) -> None:
        chains: dict[int, ChainDescriptor] = {}
        by_slug: dict[Chain, ChainDescriptor] = {}
        for chain_id, descriptor in descriptors.items():
            if chain_id != descriptor.id:
                raise ValueError(f"Registry key {chain_id} does not match descriptor id {descriptor.id}")
            if descriptor.slug in by_slug:
                raise DuplicateChainSlugError(descriptor.slug.value)
            chains[chain_id] = descriptor
            by_slug[descriptor.slug] = descriptor
        self._chains = chains
        self._by_slug = by_slug

    @classmethod
    def register(cls, descriptors: Iterable[ChainDescriptor]) -> "ChainRegistry":
        """Build a registry. Fails on the first duplicate id, leaving nothing half-built."""
        chains: dict[int, ChainDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in chains:
                raise DuplicateChainIdError(descriptor.id)
            chains[descriptor.id] = descriptor
        return cls(chains)

    def lookup(self, chain_id: int) -> ChainDescriptor:
        try:
            return self._chains[chain_id]
        except KeyError:
            raise UnknownChainError(chain_id) from None

    def lookup_slug(self, slug: Chain | str) -> ChainDescriptor:
        try:
            return self._by_slug[Chain(slug)]
        except (KeyError, ValueError):
            raise UnknownChainError(getattr(slug, "value", slug)) from None

    def all(self) -> Sequence[ChainDescriptor]:
        """Descriptors in registration order."""
        return tuple(self._chains.values())

    def ids(self) -> list[int]:
        return list(self._chains)

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._chains

    def __len__(self) -> int:
        return len(self._chains)


def build_default_registry() -> ChainRegistry:
    """Create a ChainRegistry with every supported network registered."""
    from chainconn.chains.definitions import CHAINS

    return ChainRegistry.register(CHAINS)
