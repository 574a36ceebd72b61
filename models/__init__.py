"""RFQ maker — models package."""

from .offer import Offer
from .quote import UNSUPPORTED_REQUEST, QuoteRequest, QuoteResponse
from .token import TokenInfo

__all__ = [
    "Offer",
    "QuoteRequest",
    "QuoteResponse",
    "TokenInfo",
    "UNSUPPORTED_REQUEST",
]
