"""OfferBuilder — unsigned RFQ offers for direct and intermediate swaps.

Direct swap (taker is the user):

1. **Direct offer** — native token addresses, the request's fee factor,
   no flags.  Only when the whole sell amount can be filled from
   inventory.
2. **Router offer** — only with contract-sender support.  Taker is the
   smart-order router, native coins are wrapped, fee factor is zero and
   the amounts may be clamped to inventory (a partial fill).

Intermediate swap (the router is hopping through this maker): exactly
one router offer.
"""

from __future__ import annotations

import secrets
import time
from decimal import Decimal
from typing import Callable

import structlog

from models.offer import Offer
from models.quote import QuoteRequest
from strategy.amounts import AmountCalculator, AmountQuote, to_base_units
from strategy.flags import encode_flags, router_flags
from strategy.quoter_config import QuoterConfig

logger = structlog.get_logger("strategy.offer_builder")

_FULL_FILL = Decimal("1")


def generate_salt() -> int:
    """256-bit salt from the OS CSPRNG."""
    return secrets.randbits(256)


class OfferBuilder:
    """Assembles unsigned offers for a QuoteRequest.

    ``clock`` returns unix seconds and ``salt_source`` a 256-bit integer;
    both are injectable so tests can pin expiry and salt.
    """

    def __init__(
        self,
        config: QuoterConfig,
        calculator: AmountCalculator,
        maker_address: str,
        clock: Callable[[], float] = time.time,
        salt_source: Callable[[], int] = generate_salt,
    ) -> None:
        self._config = config
        self._calculator = calculator
        self._maker = maker_address
        self._clock = clock
        self._salt_source = salt_source

    async def build_offers(self, request: QuoteRequest) -> list[Offer]:
        """Build the offers for ``request``; the direct offer, if any, comes first."""
        if request.is_intermediate_swap:
            if not self._config.allow_contract_sender:
                raise ValueError("intermediate swaps require contract-sender support")
            return [await self._router_offer(request)]
        return await self._direct_swap_offers(request)

    # ── Modes ────────────────────────────────────────────────────

    async def _direct_swap_offers(self, request: QuoteRequest) -> list[Offer]:
        offers: list[Offer] = []
        requested = to_base_units(request.sell_amount, request.from_token.decimals)

        amounts = await self._calculator.compute_amounts(request, _FULL_FILL)
        if not amounts.clamped and amounts.taker_amount == requested:
            offers.append(self._direct_offer(request, amounts))
        else:
            logger.info(
                "offer_builder.direct_offer_skipped",
                chain_id=request.chain_id,
                requested=requested,
                taker_amount=amounts.taker_amount,
                clamped=amounts.clamped,
            )

        if self._config.allow_contract_sender:
            router_amounts = await self._calculator.compute_amounts(request, _FULL_FILL)
            if router_amounts.taker_amount <= requested:
                offers.append(self._make_router_offer(request, router_amounts))

        return offers

    async def _router_offer(self, request: QuoteRequest) -> Offer:
        amounts = await self._calculator.compute_amounts(request, _FULL_FILL)
        return self._make_router_offer(request, amounts)

    # ── Assembly ─────────────────────────────────────────────────

    def _direct_offer(self, request: QuoteRequest, amounts: AmountQuote) -> Offer:
        return Offer(
            taker=request.user_address,
            maker=self._maker,
            taker_token=request.from_token.address,
            taker_token_amount=amounts.taker_amount,
            maker_token=request.to_token.address,
            maker_token_amount=amounts.maker_amount,
            fee_factor=request.fee_factor,
            flags=0,
            expiry=self._expiry(),
            salt=self._salt_source(),
        )

    def _make_router_offer(self, request: QuoteRequest, amounts: AmountQuote) -> Offer:
        chains = self._config.chains
        chain_id = request.chain_id
        return Offer(
            taker=chains[chain_id].smart_order_router,
            maker=self._maker,
            taker_token=chains.wrap(chain_id, request.from_token.address),
            taker_token_amount=amounts.taker_amount,
            maker_token=chains.wrap(chain_id, request.to_token.address),
            maker_token_amount=amounts.maker_amount,
            fee_factor=0,
            flags=encode_flags(router_flags(self._config.allow_partial_fill)),
            expiry=self._expiry(),
            salt=self._salt_source(),
        )

    def _expiry(self) -> int:
        return int(self._clock()) + self._config.offer_ttl_seconds
