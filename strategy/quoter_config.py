"""QuoterConfig — the immutable configuration value shared by the quoting core."""

from __future__ import annotations

from dataclasses import dataclass

from config.chains import DEFAULT_CHAINS, ChainTable
from config.settings import Settings
from strategy.rate_table import RateTable


@dataclass(frozen=True)
class QuoterConfig:
    """Static, read-only inputs of the quoting core.

    Built once at startup and passed explicitly to the QuoteEngine,
    OfferBuilder, AmountCalculator and EIP712Signer.
    """

    chains: ChainTable
    rates: RateTable
    allow_contract_sender: bool = False
    allow_partial_fill: bool = False
    offer_ttl_seconds: int = 300

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        chains: ChainTable = DEFAULT_CHAINS,
    ) -> QuoterConfig:
        if settings.RATE_TABLE_PATH:
            rates = RateTable.from_yaml(settings.RATE_TABLE_PATH, chains)
        else:
            rates = RateTable.default(chains)
        return cls(
            chains=chains,
            rates=rates,
            allow_contract_sender=settings.ALLOW_CONTRACT_SENDER,
            allow_partial_fill=settings.ALLOW_PARTIAL_FILL,
            offer_ttl_seconds=settings.OFFER_EXPIRY_SECONDS,
        )
