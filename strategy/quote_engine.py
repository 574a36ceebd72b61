"""QuoteEngine — classifies a QuoteRequest and produces the signed offer set.

Flow::

    QuoteRequest
        → reject (intermediate swap without contract-sender support,
          unknown chain, unquotable pair, amounts beyond uint256)
        → OfferBuilder.build_offers()
        → EIP712Signer.sign_offer() for every offer
        → QuoteResponse

The engine holds no state between requests.
"""

from __future__ import annotations

import asyncio

import structlog

from core.exceptions import AmountOutOfRangeError, UnquotablePairError
from models.offer import Offer
from models.quote import UNSUPPORTED_REQUEST, QuoteRequest, QuoteResponse
from strategy.offer_builder import OfferBuilder
from strategy.quoter_config import QuoterConfig
from web3_infra.eip712_signer import EIP712Signer

logger = structlog.get_logger("strategy.quote_engine")

UNSUPPORTED_CHAIN = "unsupported chain"
UNSUPPORTED_PAIR = "unsupported token pair"
AMOUNT_OUT_OF_RANGE = "amount out of range"


class QuoteEngine:
    """Drives OfferBuilder and EIP712Signer for one request at a time.

    Usage::

        engine = QuoteEngine(config, builder, signer)
        response = await engine.quote(request)
        body = response.to_payload()
    """

    def __init__(
        self,
        config: QuoterConfig,
        builder: OfferBuilder,
        signer: EIP712Signer,
    ) -> None:
        self._config = config
        self._builder = builder
        self._signer = signer

    @property
    def config(self) -> QuoterConfig:
        """Return current configuration (read-only)."""
        return self._config

    async def quote(self, request: QuoteRequest) -> QuoteResponse:
        """Quote ``request``.

        Returns ``exchangeable=False`` for requests this maker does not
        serve.  Oracle and signing failures propagate to the caller.
        """
        log = logger.bind(
            chain_id=request.chain_id,
            from_token=request.from_token.address,
            to_token=request.to_token.address,
            intermediate=request.is_intermediate_swap,
        )

        if request.is_intermediate_swap and not self._config.allow_contract_sender:
            log.info("quote_engine.rejected", reason=UNSUPPORTED_REQUEST)
            return QuoteResponse.unsupported(UNSUPPORTED_REQUEST)

        if not self._config.chains.supports(request.chain_id):
            log.info("quote_engine.rejected", reason=UNSUPPORTED_CHAIN)
            return QuoteResponse.unsupported(UNSUPPORTED_CHAIN)

        try:
            offers = await self._builder.build_offers(request)
        except UnquotablePairError:
            log.info("quote_engine.rejected", reason=UNSUPPORTED_PAIR)
            return QuoteResponse.unsupported(UNSUPPORTED_PAIR)
        except AmountOutOfRangeError as exc:
            log.info("quote_engine.rejected", reason=AMOUNT_OUT_OF_RANGE, error=str(exc))
            return QuoteResponse.unsupported(AMOUNT_OUT_OF_RANGE)

        signed = await asyncio.gather(
            *(self._sign(request.chain_id, offer) for offer in offers)
        )
        log.info("quote_engine.quoted", num_offers=len(signed))
        return QuoteResponse(exchangeable=True, offers=list(signed))

    async def _sign(self, chain_id: int, offer: Offer) -> Offer:
        result = await self._signer.sign_offer(chain_id, offer)
        return offer.signed(result.offer_hash, result.signature)
