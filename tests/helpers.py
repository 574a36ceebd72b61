"""Test helpers: fixed keys, addresses, a fake InventoryOracle, builders."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from config.chains import DEFAULT_CHAINS, ZERO_ADDRESS
from models.quote import QuoteRequest
from strategy.quoter_config import QuoterConfig
from strategy.rate_table import RateTable

# Well-known development key (hardhat account #0); never holds funds.
MAKER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
MAKER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
USER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

MAINNET = DEFAULT_CHAINS[1]
ETH = ZERO_ADDRESS
USDT = MAINNET.usdt
WETH = MAINNET.wrapped_native
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"

USDT_UNIT = 10**6
ETH_UNIT = 10**18


class FakeOracle:
    """InventoryOracle returning a fixed balance and recording calls."""

    def __init__(self, balance: int = 0, error: Exception | None = None) -> None:
        self.balance = balance
        self.error = error
        self.calls: list[tuple[int, str, str]] = []

    async def get_balance(self, chain_id: int, token: str, owner: str) -> int:
        self.calls.append((chain_id, token, owner))
        if self.error is not None:
            raise self.error
        return self.balance


def make_request(**overrides: Any) -> QuoteRequest:
    """1 ETH → USDT on mainnet, direct swap."""
    defaults: dict[str, Any] = dict(
        chain_id=1,
        from_token={"address": ETH, "decimals": 18},
        to_token={"address": USDT, "decimals": 6},
        sell_amount=Decimal("1"),
        fee_factor=0,
        user_address=USER_ADDRESS,
        is_intermediate_swap=False,
    )
    defaults.update(overrides)
    return QuoteRequest(**defaults)


def make_config(
    allow_contract_sender: bool = False,
    allow_partial_fill: bool = False,
    offer_ttl_seconds: int = 300,
    rates: RateTable | None = None,
) -> QuoterConfig:
    return QuoterConfig(
        chains=DEFAULT_CHAINS,
        rates=RateTable.default(DEFAULT_CHAINS) if rates is None else rates,
        allow_contract_sender=allow_contract_sender,
        allow_partial_fill=allow_partial_fill,
        offer_ttl_seconds=offer_ttl_seconds,
    )


