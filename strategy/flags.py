"""Offer flag bits.

The RFQ contract reads two capability bits from the top of the uint256
``flags`` field.  This module is the only place that knows the layout.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class OfferFlag(str, Enum):
    """Capabilities an offer can grant its taker."""

    ALLOW_CONTRACT_SENDER = "ALLOW_CONTRACT_SENDER"
    ALLOW_PARTIAL_FILL = "ALLOW_PARTIAL_FILL"


FLAG_BITS: dict[OfferFlag, int] = {
    OfferFlag.ALLOW_CONTRACT_SENDER: 255,
    OfferFlag.ALLOW_PARTIAL_FILL: 254,
}

_KNOWN_MASK = sum(1 << bit for bit in FLAG_BITS.values())


def encode_flags(flags: Iterable[OfferFlag]) -> int:
    """OR the bits of ``flags`` into a uint256. No flags encodes as 0."""
    value = 0
    for flag in flags:
        value |= 1 << FLAG_BITS[flag]
    return value


def decode_flags(value: int) -> frozenset[OfferFlag]:
    """Inverse of :func:`encode_flags`. Unknown bits are rejected."""
    if value < 0 or value & ~_KNOWN_MASK:
        raise ValueError(f"unknown offer flag bits in {value:#x}")
    return frozenset(
        flag for flag, bit in FLAG_BITS.items() if value & (1 << bit)
    )


def router_flags(allow_partial_fill: bool) -> frozenset[OfferFlag]:
    """Flags carried by offers whose taker is the smart-order router."""
    if allow_partial_fill:
        return frozenset({OfferFlag.ALLOW_CONTRACT_SENDER, OfferFlag.ALLOW_PARTIAL_FILL})
    return frozenset({OfferFlag.ALLOW_CONTRACT_SENDER})
