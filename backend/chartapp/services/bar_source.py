"""Bar loading with synthetic fallback.

Symbols with a synthetic profile are always generated locally. Other
symbols are fetched from the quote client when one is configured; a
failed or empty fetch falls back to the synthesizer, which returns an
empty list for symbols it does not know.
"""

import logging
from dataclasses import dataclass, field

from chartapp.clients.quote_client import QuoteClient
from chartcore.models import Bar
from chartcore.synthesizer import BarSynthesizer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadedBars:
    """Result of a bar load."""

    symbol: str
    timeframe: str
    bars: list[Bar] = field(default_factory=list)
    is_real: bool = False  # True when fetched from the quote source

    def __len__(self) -> int:
        return len(self.bars)


class BarSource:
    """Chooses between external quotes and synthetic generation."""

    def __init__(
        self,
        client: QuoteClient | None = None,
        synthesizer: BarSynthesizer | None = None,
    ):
        self.client = client
        self.synthesizer = synthesizer or BarSynthesizer()

    def is_simulated(self, symbol: str) -> bool:
        """Check if a symbol has a synthetic profile."""
        return symbol in self.synthesizer.profiles

    async def load(self, symbol: str, timeframe: str) -> LoadedBars:
        """
        Load bars for a symbol and timeframe.

        Args:
            symbol: Symbol identifier
            timeframe: Timeframe label

        Returns:
            LoadedBars (bars may be empty when no source has data)
        """
        if self.client is not None and not self.is_simulated(symbol):
            bars = await self.client.fetch_bars(symbol, timeframe)
            if bars:
                return LoadedBars(symbol, timeframe, bars, is_real=True)
            logger.info(f"No real data for {symbol} {timeframe}, using simulation")

        bars = self.synthesizer.generate(symbol, timeframe)
        if not bars:
            logger.warning(f"No data available for {symbol} {timeframe}")
        return LoadedBars(symbol, timeframe, bars, is_real=False)
