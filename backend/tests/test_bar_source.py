"""Tests for bar loading with synthetic fallback."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from chartapp.services import BarSource
from chartcore.models import Bar
from chartcore.synthesizer import BarSynthesizer, generate_bars

NOW = 1_700_000_000


def make_source(client=None) -> BarSource:
    return BarSource(client=client, synthesizer=BarSynthesizer(clock=lambda: NOW))


def real_bars() -> list[Bar]:
    return [
        Bar(
            time=i * 86400,
            open=Decimal("50"),
            high=Decimal("51"),
            low=Decimal("49"),
            close=Decimal("50.5"),
            volume=Decimal("100"),
        )
        for i in range(3)
    ]


class TestBarSource:
    """Tests for BarSource.load."""

    @pytest.mark.asyncio
    async def test_simulated_symbol_skips_client(self):
        """Symbols with a profile are generated locally."""
        client = AsyncMock()
        loaded = await make_source(client).load("AAPL", "1D")

        client.fetch_bars.assert_not_called()
        assert loaded.is_real is False
        assert loaded.bars == generate_bars("AAPL", "1D", now=NOW)
        assert len(loaded) == 500

    @pytest.mark.asyncio
    async def test_real_symbol_uses_client(self):
        """Other symbols are fetched when a client is configured."""
        client = AsyncMock()
        client.fetch_bars.return_value = real_bars()

        loaded = await make_source(client).load("AMZN", "1D")

        client.fetch_bars.assert_awaited_once_with("AMZN", "1D")
        assert loaded.is_real is True
        assert loaded.bars == real_bars()

    @pytest.mark.asyncio
    async def test_failed_fetch_falls_back(self):
        """A None fetch result is treated like no real data."""
        client = AsyncMock()
        client.fetch_bars.return_value = None

        loaded = await make_source(client).load("AMZN", "1D")

        assert loaded.is_real is False
        assert loaded.bars == []

    @pytest.mark.asyncio
    async def test_empty_fetch_falls_back(self):
        """An empty fetch result is treated like no real data."""
        client = AsyncMock()
        client.fetch_bars.return_value = []

        loaded = await make_source(client).load("AMZN", "1h")

        assert loaded.is_real is False
        assert loaded.bars == []

    @pytest.mark.asyncio
    async def test_no_client_unknown_symbol(self):
        """Without a client unknown symbols yield no data."""
        loaded = await make_source().load("XXX-NONE", "1D")

        assert loaded.bars == []
        assert loaded.is_real is False
