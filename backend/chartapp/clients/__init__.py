"""External data clients."""

from chartapp.clients.quote_client import (
    QUOTE_TIMEFRAMES,
    QuoteClient,
    SymbolMatch,
)

__all__ = [
    "QUOTE_TIMEFRAMES",
    "QuoteClient",
    "SymbolMatch",
]
