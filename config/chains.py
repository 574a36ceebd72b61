"""Per-chain address tables: router, RFQ contract, wrapped native, USDT.

Lookups for chain ids that are not configured raise ``ConfigurationError``
instead of falling back to an empty address.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from core.exceptions import ConfigurationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ETH_PLACEHOLDER_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

_NATIVE_ADDRESSES = frozenset(
    a.lower() for a in (ZERO_ADDRESS, ETH_PLACEHOLDER_ADDRESS)
)


def is_native(address: str) -> bool:
    """True if ``address`` denotes the chain's native coin."""
    return address.lower() in _NATIVE_ADDRESSES


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


@dataclass(frozen=True)
class ChainAddresses:
    """Static contract addresses for one chain."""

    chain_id: int
    smart_order_router: str
    rfq_contract: str
    wrapped_native: str
    usdt: str


class ChainTable(Mapping[int, ChainAddresses]):
    """Read-only chain id → ``ChainAddresses`` mapping."""

    def __init__(self, chains: list[ChainAddresses]) -> None:
        self._chains = {c.chain_id: c for c in chains}

    def __getitem__(self, chain_id: int) -> ChainAddresses:
        try:
            return self._chains[chain_id]
        except KeyError:
            raise ConfigurationError(
                f"chain {chain_id} is not configured"
            ) from None

    def __iter__(self) -> Iterator[int]:
        return iter(self._chains)

    def __len__(self) -> int:
        return len(self._chains)

    def supports(self, chain_id: int) -> bool:
        return chain_id in self._chains

    def wrap(self, chain_id: int, address: str) -> str:
        """Resolve a native-coin address to the chain's wrapped token.

        Pure function of the chain id; non-native addresses pass through.
        """
        if is_native(address):
            return self[chain_id].wrapped_native
        return address


DEFAULT_CHAINS = ChainTable([
    ChainAddresses(
        chain_id=1,
        smart_order_router="0x5e30Ee498190C6F5D602f977ECEDad035745B796",
        rfq_contract="0xF45b4428B02e5EFFf08a88F4383224d6EA447935",
        wrapped_native="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        usdt="0xdAC17F958D2ee523a2206206994597C13D831ec7",
    ),
    ChainAddresses(
        chain_id=11155111,
        smart_order_router="0x3A9AD38c4440E90b80f89cF6D0dE25df8bDF7128",
        rfq_contract="0x4a91D7c1bEfd96C29306a421719c4FDAAB205d14",
        wrapped_native="0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14",
        usdt="0x7169D38820dfd117C3FA1f22a697dBA58d90BA06",
    ),
])
