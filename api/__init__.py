"""RFQ maker — HTTP api package."""

from .server import QuoteServer

__all__ = ["QuoteServer"]
