"""QuoteRequest / QuoteResponse — the /quote payload shapes."""

from __future__ import annotations

from decimal import Context, Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .offer import UINT256_MAX, Offer
from .token import ADDRESS_PATTERN, TokenInfo

UNSUPPORTED_REQUEST = "unsupported quote request"

# Exact for any uint256 at up to 77 decimals.
_BASE_UNIT_CONTEXT = Context(prec=160)


class QuoteRequest(BaseModel):
    """Inbound swap request (camelCase JSON, human-unit ``sellAmount``)."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    chain_id: int = Field(..., gt=0)
    from_token: TokenInfo
    to_token: TokenInfo
    sell_amount: Decimal = Field(..., gt=0, description="Human units, e.g. '1.5'")
    fee_factor: int = Field(default=0, ge=0, le=UINT256_MAX)
    user_address: str = Field(..., pattern=ADDRESS_PATTERN)
    is_intermediate_swap: bool = False

    @model_validator(mode="after")
    def distinct_tokens(self) -> QuoteRequest:
        if self.from_token.same_address(self.to_token.address):
            raise ValueError("fromToken and toToken must differ")
        return self

    @model_validator(mode="after")
    def sell_amount_fits_uint256(self) -> QuoteRequest:
        base_units = self.sell_amount.scaleb(
            self.from_token.decimals, context=_BASE_UNIT_CONTEXT
        )
        if base_units > UINT256_MAX:
            raise ValueError("sellAmount exceeds uint256 in base units")
        return self


class QuoteResponse(BaseModel):
    """Outcome of a quote: signed offers, or a reason it is not exchangeable.

    An empty ``offers`` list with ``exchangeable=True`` is a valid answer
    meaning "no fillable offer right now".
    """

    exchangeable: bool
    offers: Optional[list[Offer]] = None
    message: Optional[str] = None

    @classmethod
    def unsupported(cls, message: str = UNSUPPORTED_REQUEST) -> QuoteResponse:
        return cls(exchangeable=False, message=message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"exchangeable": self.exchangeable}
        if self.offers is not None:
            payload["offers"] = [o.to_payload() for o in self.offers]
        if self.message is not None:
            payload["message"] = self.message
        return payload
