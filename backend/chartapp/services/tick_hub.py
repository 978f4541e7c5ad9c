"""Live price-tick simulation for the watchlist.

A TickHub owns the last-price state for a set of symbols and perturbs
each price by a small random fraction on a fixed cadence, notifying
subscribers after every update.

Usage:
    hub = TickHub()
    hub.subscribe("AAPL", lambda price: print(price))
    await hub.start()
    ...
    await hub.stop()

Each hub is independent, so tests (or several charts) can run their own
simulation without sharing state.
"""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from decimal import Decimal
from typing import Callable, Mapping

from chartapp.config import get_settings
from chartcore.models import SYMBOL_PROFILES, SymbolProfile
from chartcore.precision import round_price
from chartcore.synthesizer import BarSynthesizer

logger = logging.getLogger(__name__)

TickCallback = Callable[[Decimal], None]

# Draws below this center move the price down; slightly above 0.5 drift
TICK_CENTER = 0.495
# Tick dispersion as a fraction of the symbol's per-bar volatility
TICK_VOLATILITY_DIVISOR = 20


class TickHub:
    """Owns per-symbol last prices and their subscribers.

    The background task is the only writer of last prices. Each write
    replaces a single dict entry, so readers always see the most recently
    completed value. The lock serializes writers and subscriber list
    changes when the hub is driven from more than one thread.
    """

    def __init__(
        self,
        profiles: Mapping[str, SymbolProfile] = SYMBOL_PROFILES,
        synthesizer: BarSynthesizer | None = None,
        rng: random.Random | None = None,
        tick_interval: float | None = None,
        seed_timeframe: str | None = None,
    ):
        settings = get_settings()
        self.profiles = profiles
        self.tick_interval = (
            tick_interval if tick_interval is not None else settings.tick_interval
        )
        self.seed_timeframe = seed_timeframe or settings.tick_seed_timeframe

        self._synthesizer = synthesizer or BarSynthesizer(profiles=profiles)
        self._rng = rng or random.Random()
        self._last_prices: dict[str, Decimal] = {}
        self._listeners: dict[str, list[TickCallback]] = {}
        self._lock = threading.Lock()
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if the tick task is active."""
        return self._running

    def seed_prices(self) -> None:
        """Seed last prices from the tail close of a fresh bar sequence."""
        for symbol, profile in self.profiles.items():
            bars = self._synthesizer.generate(symbol, self.seed_timeframe)
            price = bars[-1].close if bars else profile.base
            with self._lock:
                self._last_prices[symbol] = price
        logger.debug(f"Seeded last prices for {len(self.profiles)} symbols")

    def subscribe(self, symbol: str, callback: TickCallback) -> None:
        """
        Register a callback for a symbol's price updates.

        Callbacks are invoked in registration order on every tick.

        Args:
            symbol: Symbol identifier
            callback: Function called with the new price
        """
        with self._lock:
            self._listeners.setdefault(symbol, []).append(callback)

    def unsubscribe(self, symbol: str, callback: TickCallback) -> bool:
        """Remove a previously registered callback.

        Returns:
            True if the callback was registered
        """
        with self._lock:
            listeners = self._listeners.get(symbol)
            if not listeners or callback not in listeners:
                return False
            listeners.remove(callback)
            if not listeners:
                del self._listeners[symbol]
            return True

    def get_last_price(self, symbol: str) -> Decimal:
        """
        Get the current price for a symbol.

        Args:
            symbol: Symbol identifier

        Returns:
            Last price, the profile's base price if never seeded or ticked,
            or 0 for an unknown symbol
        """
        # dict.get() is atomic under the GIL, no lock needed for reads
        price = self._last_prices.get(symbol)
        if price is not None:
            return price
        profile = self.profiles.get(symbol)
        if profile is None:
            return Decimal("0")
        return profile.base

    def tick(self) -> dict[str, Decimal]:
        """
        Run one tick: perturb every symbol's price and notify subscribers.

        Prices are seeded first if no seed or tick has happened yet.

        Returns:
            Dict mapping symbol to its new price
        """
        if not self._last_prices:
            self.seed_prices()

        updated: dict[str, Decimal] = {}

        for symbol, profile in self.profiles.items():
            scale = profile.volatility / TICK_VOLATILITY_DIVISOR
            change = (self._rng.random() - TICK_CENTER) * scale

            with self._lock:
                price = round_price(float(self.get_last_price(symbol)) * (1 + change))
                self._last_prices[symbol] = price
                listeners = list(self._listeners.get(symbol, ()))

            updated[symbol] = price
            self._notify(symbol, price, listeners)

        return updated

    def _notify(
        self, symbol: str, price: Decimal, listeners: list[TickCallback]
    ) -> None:
        for callback in listeners:
            try:
                callback(price)
            except Exception as e:
                logger.error(f"Tick callback error for {symbol}: {e}")

    async def start(self) -> None:
        """Seed prices and start the periodic tick task (idempotent)."""
        if self._running:
            return

        self.seed_prices()
        self._task = asyncio.create_task(self._run())
        self._running = True
        logger.info(
            f"Tick simulation started for {len(self.profiles)} symbols "
            f"every {self.tick_interval}s"
        )

    async def stop(self) -> None:
        """Stop the tick task."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Tick simulation stopped")

    async def _run(self) -> None:
        """Tick loop, one round per interval."""
        while self._running:
            await asyncio.sleep(self.tick_interval)
            try:
                self.tick()
            except Exception as e:
                logger.warning(f"Tick error: {e}")
