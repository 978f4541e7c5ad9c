"""Yahoo-style quote API client for real OHLCV data.

Requests go through a CORS proxy (the viewer runs in a browser, and the
quote API blocks direct cross-origin requests). Every failure is logged
and reported as "no data" so callers can fall back to synthetic bars.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from chartapp.config import get_settings
from chartcore.models import Bar, normalize_bars

logger = logging.getLogger(__name__)

# Chart timeframe label -> (API interval, API range)
QUOTE_TIMEFRAMES: dict[str, tuple[str, str]] = {
    "1m": ("1m", "5d"),
    "5m": ("5m", "60d"),
    "15m": ("15m", "60d"),
    "1h": ("1h", "730d"),
    "4h": ("60m", "730d"),  # no native 4h interval
    "1D": ("1d", "5y"),
    "1W": ("1wk", "max"),
}
DEFAULT_TIMEFRAME = "1D"

SEARCHABLE_QUOTE_TYPES = frozenset({
    "EQUITY",
    "ETF",
    "CRYPTOCURRENCY",
    "MUTUALFUND",
    "CURRENCY",
    "FUTURE",
    "INDEX",
})
SEARCH_RESULT_LIMIT = 20


class SymbolMatch(BaseModel):
    """A symbol search result."""

    symbol: str
    name: str
    type: str
    exchange: str = ""


class QuoteClient:
    """Async client for chart and search endpoints behind a proxy."""

    def __init__(
        self,
        base_url: str | None = None,
        proxy_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.quote_base_url).rstrip("/")
        self.proxy_url = proxy_url if proxy_url is not None else settings.quote_proxy_url
        self.timeout = timeout if timeout is not None else settings.quote_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _proxied(self, url: str) -> str:
        """Wrap an upstream URL in the proxy URL (if configured)."""
        if not self.proxy_url:
            return url
        return f"{self.proxy_url}{quote(url, safe='')}"

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET an upstream URL (through the proxy) and decode JSON."""
        full_url = str(httpx.URL(url, params=params))
        response = await self._get_client().get(self._proxied(full_url))
        response.raise_for_status()
        return response.json()

    async def fetch_bars(self, symbol: str, timeframe: str) -> list[Bar] | None:
        """
        Fetch real OHLCV bars for a symbol.

        Args:
            symbol: Upstream ticker (e.g., "AAPL", "BTC-USD")
            timeframe: Chart timeframe label (unknown labels use 1D)

        Returns:
            Normalized Bars, or None on any failure (caller should fall
            back to synthetic data)
        """
        interval, range_ = QUOTE_TIMEFRAMES.get(timeframe, QUOTE_TIMEFRAMES[DEFAULT_TIMEFRAME])
        url = f"{self.base_url}/v8/finance/chart/{quote(symbol, safe='')}"

        try:
            data = await self._get_json(url, {"interval": interval, "range": range_})
            rows = _parse_chart(data)
        except (
            httpx.HTTPError,
            ValueError,
            KeyError,
            TypeError,
            IndexError,
            AttributeError,
        ) as e:
            logger.warning(f"fetch_bars({symbol}, {timeframe}) failed: {e}")
            return None

        bars = normalize_bars(rows)
        logger.debug(f"Fetched {len(bars)} bars for {symbol} {timeframe}")
        return bars

    async def search_symbols(self, query: str) -> list[SymbolMatch]:
        """
        Search upstream symbols.

        Args:
            query: Free-text query

        Returns:
            Matches with a supported quote type (empty on failure)
        """
        if not query:
            return []

        url = f"{self.base_url}/v1/finance/search"
        params = {
            "q": query,
            "quotesCount": SEARCH_RESULT_LIMIT,
            "newsCount": 0,
            "listsCount": 0,
        }

        try:
            data = await self._get_json(url, params)
            quotes = ((data or {}).get("result") or {}).get("quotes") or []
            matches = [_symbol_match(item) for item in quotes]
        except (
            httpx.HTTPError,
            ValueError,
            TypeError,
            AttributeError,
        ) as e:
            logger.warning(f"Symbol search for {query!r} failed: {e}")
            return []

        return [match for match in matches if match is not None]


def _parse_chart(data: Any) -> list[dict[str, Any]]:
    """Extract raw OHLCV rows from a chart API response.

    Raises:
        ValueError: If the response has no chart result
    """
    results = ((data or {}).get("chart") or {}).get("result") or []
    if not results:
        raise ValueError("No data")

    result = results[0]
    timestamps = result.get("timestamp") or []
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    series = quotes[0] or {}

    def column(name: str) -> list:
        values = series.get(name) or []
        return values + [None] * (len(timestamps) - len(values))

    opens, highs, lows = column("open"), column("high"), column("low")
    closes, volumes = column("close"), column("volume")

    return [
        {
            "time": ts,
            "open": opens[i],
            "high": highs[i],
            "low": lows[i],
            "close": closes[i],
            "volume": volumes[i],
        }
        for i, ts in enumerate(timestamps)
    ]


def _symbol_match(item: Any) -> SymbolMatch | None:
    """Build a SymbolMatch from a search quote, or None if unsupported.

    Raises:
        AttributeError: If the quote is not a mapping
        ValidationError: If a field has the wrong type
    """
    if not item.get("symbol") or item.get("quoteType") not in SEARCHABLE_QUOTE_TYPES:
        return None
    return SymbolMatch(
        symbol=item["symbol"],
        name=item.get("shortname") or item.get("longname") or item["symbol"],
        type=item["quoteType"],
        exchange=item.get("exchDisp") or item.get("exchange") or "",
    )
