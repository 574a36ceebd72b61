"""RateTable — static directional exchange rates per chain."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import structlog
import yaml

from config.chains import ChainTable
from core.exceptions import ConfigurationError

logger = structlog.get_logger("strategy.rate_table")

_ZERO = Decimal("0")

# Reference rates: 1 WETH -> 3100 USDT, 1 USDT -> 0.0004 WETH
DEFAULT_NATIVE_USDT_RATE = Decimal("3100")
DEFAULT_USDT_NATIVE_RATE = Decimal("0.00040")

RateKey = tuple[int, str, str]


class RateTable:
    """Lookup of ``rate(chain, from, to)`` = units of ``to`` per unit of ``from``.

    Native-coin addresses are resolved to the chain's wrapped token before
    lookup, so ETH and WETH share a quote.  Unknown pairs return zero;
    callers must treat that as unquotable.
    """

    def __init__(self, chains: ChainTable, rates: Mapping[RateKey, Decimal]) -> None:
        self._chains = chains
        normalized: dict[RateKey, Decimal] = {}
        for (chain_id, from_addr, to_addr), rate in rates.items():
            if rate <= _ZERO:
                raise ConfigurationError(
                    f"rate for {from_addr} -> {to_addr} on chain {chain_id} must be positive"
                )
            normalized[self._key(chain_id, from_addr, to_addr)] = Decimal(rate)
        self._rates = MappingProxyType(normalized)

    def _key(self, chain_id: int, from_addr: str, to_addr: str) -> RateKey:
        return (
            chain_id,
            self._chains.wrap(chain_id, from_addr).lower(),
            self._chains.wrap(chain_id, to_addr).lower(),
        )

    def rate(self, chain_id: int, from_addr: str, to_addr: str) -> Decimal:
        return self._rates.get(self._key(chain_id, from_addr, to_addr), _ZERO)

    def supports(self, chain_id: int, from_addr: str, to_addr: str) -> bool:
        return self.rate(chain_id, from_addr, to_addr) > _ZERO

    def __len__(self) -> int:
        return len(self._rates)

    # ── Constructors ─────────────────────────────────────────────

    @classmethod
    def default(cls, chains: ChainTable) -> RateTable:
        """WETH <-> USDT on every configured chain."""
        rates: dict[RateKey, Decimal] = {}
        for chain_id in chains:
            addrs = chains[chain_id]
            rates[(chain_id, addrs.wrapped_native, addrs.usdt)] = DEFAULT_NATIVE_USDT_RATE
            rates[(chain_id, addrs.usdt, addrs.wrapped_native)] = DEFAULT_USDT_NATIVE_RATE
        return cls(chains, rates)

    @classmethod
    def from_yaml(cls, path: str | Path, chains: ChainTable) -> RateTable:
        """Load rates from YAML.

        Expected shape::

            rates:
              - chain_id: 1
                from: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
                to: "0xdAC17F958D2ee523a2206206994597C13D831ec7"
                rate: "3100"
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        rates: dict[RateKey, Decimal] = {}
        for entry in data.get("rates", []):
            try:
                key = (int(entry["chain_id"]), str(entry["from"]), str(entry["to"]))
                rates[key] = Decimal(str(entry["rate"]))
            except (KeyError, TypeError, ArithmeticError) as exc:
                raise ConfigurationError(f"invalid rate entry {entry!r}") from exc

        table = cls(chains, rates)
        logger.info("rate_table.loaded", path=str(path), pairs=len(table))
        return table
