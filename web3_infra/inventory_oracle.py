"""InventoryOracle — the maker's on-chain ERC20 balances.

One ``balanceOf`` round trip per lookup.  Failures propagate as
``OracleError``; a failed read is never reported as a zero balance.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

import structlog
from web3 import AsyncWeb3, Web3
from web3.providers import AsyncHTTPProvider

from core.exceptions import ConfigurationError, OracleError

logger = structlog.get_logger("web3_infra.inventory_oracle")

ERC20_BALANCE_ABI: list[dict[str, Any]] = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]


class InventoryOracle(Protocol):
    """Anything that can report a token balance in base units."""

    async def get_balance(self, chain_id: int, token: str, owner: str) -> int:
        ...


class Erc20InventoryOracle:
    """Reads ERC20 balances through one JSON-RPC endpoint per chain.

    Parameters
    ----------
    endpoints:
        Chain id → JSON-RPC URL.
    request_timeout_s:
        HTTP timeout applied to every RPC call.
    required_chains:
        Chains that must have an endpoint; a missing one raises
        ``ConfigurationError`` at construction.
    """

    def __init__(
        self,
        endpoints: dict[int, str],
        request_timeout_s: float = 10.0,
        required_chains: Iterable[int] = (),
    ) -> None:
        missing = sorted(c for c in required_chains if not endpoints.get(c))
        if missing:
            raise ConfigurationError(
                f"no JSON-RPC endpoint configured for chains {missing}"
            )
        self._endpoints = dict(endpoints)
        self._timeout = request_timeout_s
        self._web3_instances: dict[int, AsyncWeb3] = {}

    def _web3_for(self, chain_id: int) -> AsyncWeb3:
        w3 = self._web3_instances.get(chain_id)
        if w3 is not None:
            return w3
        url = self._endpoints.get(chain_id)
        if not url:
            raise ConfigurationError(f"no JSON-RPC endpoint configured for chain {chain_id}")
        w3 = AsyncWeb3(AsyncHTTPProvider(url, request_kwargs={"timeout": self._timeout}))
        self._web3_instances[chain_id] = w3
        return w3

    async def get_balance(self, chain_id: int, token: str, owner: str) -> int:
        w3 = self._web3_for(chain_id)
        contract = w3.eth.contract(
            address=Web3.to_checksum_address(token),
            abi=ERC20_BALANCE_ABI,
        )
        try:
            balance = await contract.functions.balanceOf(
                Web3.to_checksum_address(owner)
            ).call()
        except Exception as exc:
            logger.warning(
                "inventory_oracle.balance_failed",
                chain_id=chain_id,
                token=token,
                error=str(exc),
            )
            raise OracleError(
                f"balanceOf({owner}) on {token} failed",
                chain_id=chain_id,
                token=token,
                last_error=exc,
            ) from exc

        logger.debug(
            "inventory_oracle.balance",
            chain_id=chain_id,
            token=token,
            balance=balance,
        )
        return int(balance)
