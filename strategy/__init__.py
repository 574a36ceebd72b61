"""RFQ maker — strategy package."""

from .amounts import (
    AmountCalculator,
    AmountQuote,
    from_base_units,
    round_down,
    to_base_units,
)
from .flags import OfferFlag, decode_flags, encode_flags, router_flags
from .offer_builder import OfferBuilder, generate_salt
from .quote_engine import QuoteEngine
from .quoter_config import QuoterConfig
from .rate_table import RateTable

__all__ = [
    "AmountCalculator",
    "AmountQuote",
    "OfferBuilder",
    "OfferFlag",
    "QuoteEngine",
    "QuoterConfig",
    "RateTable",
    "decode_flags",
    "encode_flags",
    "from_base_units",
    "generate_salt",
    "round_down",
    "router_flags",
    "to_base_units",
]
