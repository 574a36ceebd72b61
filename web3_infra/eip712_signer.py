"""EIP712Signer — Tokenlon v6 ``RFQOffer`` hashing and off-loop signing.

Signing is CPU-bound (elliptic-curve math), so we offload it to a
``ProcessPoolExecutor`` to avoid blocking the asyncio event loop.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any

import structlog
from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from web3 import Web3

from config.chains import ChainTable
from core.exceptions import ConfigurationError, SigningError
from models.offer import Offer

logger = structlog.get_logger("web3_infra.eip712_signer")

DOMAIN_NAME = "Tokenlon"
DOMAIN_VERSION = "v6"

RFQ_OFFER_TYPES: dict[str, list[dict[str, str]]] = {
    "RFQOffer": [
        {"name": "taker", "type": "address"},
        {"name": "maker", "type": "address"},
        {"name": "takerToken", "type": "address"},
        {"name": "takerTokenAmount", "type": "uint256"},
        {"name": "makerToken", "type": "address"},
        {"name": "makerTokenAmount", "type": "uint256"},
        {"name": "feeFactor", "type": "uint256"},
        {"name": "flags", "type": "uint256"},
        {"name": "expiry", "type": "uint256"},
        {"name": "salt", "type": "uint256"},
    ],
}


@dataclass(frozen=True)
class SignedOffer:
    """Result of signing an offer with EIP-712."""

    offer_hash: str
    signature: str


def _hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def _signable(domain: dict[str, Any], message: dict[str, Any]) -> SignableMessage:
    return encode_typed_data(
        domain_data=domain,
        message_types=RFQ_OFFER_TYPES,
        message_data=message,
    )


# ── Module-level signing function (must be picklable for multiprocessing) ──


def _sign_offer_sync(
    message: dict[str, Any],
    domain: dict[str, Any],
    private_key: str,
) -> SignedOffer:
    """Synchronous signing function executed in a worker process.

    ``offer_hash`` is the EIP-712 struct hash of the offer (``hashStruct``);
    the signature covers the full domain-bound digest.
    """
    signable = _signable(domain, message)
    signed = Account.sign_message(signable, private_key=private_key)
    return SignedOffer(
        offer_hash=_hex(signable.body),
        signature=_hex(signed.signature),
    )


# ── Async signer class ──────────────────────────────────────────────


class EIP712Signer:
    """Async-safe signer for RFQ offers, backed by a process pool.

    Parameters
    ----------
    private_key:
        Hex-encoded maker key.  Only the derived address is exposed.
    chains:
        Chain table providing the RFQ verifying contract per chain.
    max_workers:
        Number of processes in the signing pool.  Defaults to 2.
    """

    def __init__(
        self,
        private_key: str,
        chains: ChainTable,
        max_workers: int = 2,
    ) -> None:
        try:
            account = Account.from_key(private_key)
        except Exception as exc:
            raise ConfigurationError("maker private key is missing or invalid") from exc

        self._private_key = private_key
        self._maker_address: str = account.address
        self._chains = chains
        self._max_workers = max_workers
        self._pool: ProcessPoolExecutor | None = None

    @property
    def maker_address(self) -> str:
        """Checksummed address of the maker key."""
        return self._maker_address

    # ── Lifecycle ────────────────────────────────────────────────

    def start(self) -> None:
        """Start the process pool.  Idempotent."""
        if self._pool is None:
            self._pool = ProcessPoolExecutor(max_workers=self._max_workers)
            logger.info(
                "eip712_signer.started",
                max_workers=self._max_workers,
                maker=self._maker_address,
            )

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the process pool."""
        if self._pool is not None:
            self._pool.shutdown(wait=wait)
            self._pool = None
            logger.info("eip712_signer.shutdown")

    # ── Hashing ──────────────────────────────────────────────────

    def domain(self, chain_id: int) -> dict[str, Any]:
        """EIP-712 domain for ``chain_id``.

        Raises
        ------
        ConfigurationError
            If the chain has no RFQ contract configured.
        """
        return {
            "name": DOMAIN_NAME,
            "version": DOMAIN_VERSION,
            "chainId": chain_id,
            "verifyingContract": Web3.to_checksum_address(
                self._chains[chain_id].rfq_contract
            ),
        }

    def hash_offer(self, chain_id: int, offer: Offer) -> str:
        """Recompute the struct hash of ``offer`` (its ``offerHash``)."""
        return _hex(_signable(self.domain(chain_id), offer.typed_message()).body)

    def recover_signer(self, chain_id: int, offer: Offer) -> str:
        """Address that produced ``offer.maker_signature``."""
        if offer.maker_signature is None:
            raise ValueError("offer is not signed")
        signable = _signable(self.domain(chain_id), offer.typed_message())
        return Account.recover_message(signable, signature=offer.maker_signature)

    # ── Signing ──────────────────────────────────────────────────

    async def sign_offer(self, chain_id: int, offer: Offer) -> SignedOffer:
        """Sign ``offer`` asynchronously (offloaded to the process pool).

        Raises
        ------
        SigningError
            If the signer has not been started or the signing operation fails.
        """
        if self._pool is None:
            raise SigningError("EIP712Signer not started, call start() first")

        domain = self.domain(chain_id)
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(
                self._pool,
                _sign_offer_sync,
                offer.typed_message(),
                domain,
                self._private_key,
            )
        except Exception as exc:
            logger.error("eip712_signer.failed", chain_id=chain_id, error=str(exc))
            raise SigningError(f"failed to sign offer on chain {chain_id}") from exc

        logger.debug(
            "eip712_signer.signed",
            chain_id=chain_id,
            offer_hash=result.offer_hash,
        )
        return result

    # ── Context manager ──────────────────────────────────────────

    async def __aenter__(self) -> EIP712Signer:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.shutdown(wait=True)
