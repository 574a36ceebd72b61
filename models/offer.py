"""Offer — an RFQ offer, unsigned until the EIP712Signer has run."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from web3 import Web3

from .token import ADDRESS_PATTERN

UINT256_MAX = 2**256 - 1


def to_hex_uint256(value: int) -> str:
    """Render a uint256 as a 0x-prefixed, 64-digit hex string."""
    return f"0x{value:064x}"


class Offer(BaseModel):
    """A maker offer for the Tokenlon v6 RFQ contract.

    Amounts are base-unit integers.  ``offer_hash`` and ``maker_signature``
    stay ``None`` until :meth:`signed` is called with the signer output.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    taker: str = Field(..., pattern=ADDRESS_PATTERN)
    maker: str = Field(..., pattern=ADDRESS_PATTERN)
    taker_token: str = Field(..., pattern=ADDRESS_PATTERN)
    taker_token_amount: int = Field(..., ge=0, le=UINT256_MAX)
    maker_token: str = Field(..., pattern=ADDRESS_PATTERN)
    maker_token_amount: int = Field(..., ge=0, le=UINT256_MAX)
    fee_factor: int = Field(default=0, ge=0, le=UINT256_MAX)
    flags: int = Field(default=0, ge=0, le=UINT256_MAX)
    expiry: int = Field(..., ge=0)
    salt: int = Field(..., ge=0, le=UINT256_MAX)

    offer_hash: Optional[str] = Field(default=None)
    maker_signature: Optional[str] = Field(default=None)

    @property
    def is_signed(self) -> bool:
        return self.offer_hash is not None and self.maker_signature is not None

    def typed_message(self) -> dict[str, Any]:
        """The ten signable fields, in EIP-712 ``RFQOffer`` order."""
        return {
            "taker": Web3.to_checksum_address(self.taker),
            "maker": Web3.to_checksum_address(self.maker),
            "takerToken": Web3.to_checksum_address(self.taker_token),
            "takerTokenAmount": self.taker_token_amount,
            "makerToken": Web3.to_checksum_address(self.maker_token),
            "makerTokenAmount": self.maker_token_amount,
            "feeFactor": self.fee_factor,
            "flags": self.flags,
            "expiry": self.expiry,
            "salt": self.salt,
        }

    def signed(self, offer_hash: str, maker_signature: str) -> Offer:
        """Return a copy carrying the derived hash and signature."""
        return self.model_copy(
            update={"offer_hash": offer_hash, "maker_signature": maker_signature}
        )

    def to_payload(self) -> dict[str, str]:
        """JSON wire shape: integers as decimal strings, salt as hex."""
        payload = {
            "taker": self.taker,
            "maker": self.maker,
            "takerToken": self.taker_token,
            "takerTokenAmount": str(self.taker_token_amount),
            "makerToken": self.maker_token,
            "makerTokenAmount": str(self.maker_token_amount),
            "feeFactor": str(self.fee_factor),
            "flags": str(self.flags),
            "expiry": str(self.expiry),
            "salt": to_hex_uint256(self.salt),
        }
        if self.offer_hash is not None:
            payload["offerHash"] = self.offer_hash
        if self.maker_signature is not None:
            payload["makerSignature"] = self.maker_signature
        return payload
