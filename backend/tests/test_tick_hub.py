"""Tests for the tick simulation hub."""

import asyncio
import random
from decimal import Decimal
from unittest.mock import patch

import pytest

from chartapp.services import TickHub
from chartcore.models import SYMBOL_PROFILES
from chartcore.synthesizer import BarSynthesizer, generate_bars

NOW = 1_700_000_000


def make_hub(seed: int = 42, **kwargs) -> TickHub:
    """Helper to create a hub with a fixed clock and RNG."""
    return TickHub(
        synthesizer=BarSynthesizer(clock=lambda: NOW),
        rng=random.Random(seed),
        **kwargs,
    )


class TestLastPrice:
    """Tests for get_last_price and seeding."""

    def test_unknown_symbol_is_zero(self):
        """Unknown symbols report 0."""
        assert make_hub().get_last_price("XXX-NONE") == Decimal("0")

    def test_base_before_seeding(self):
        """Before seeding or ticking the base price is reported."""
        hub = make_hub()
        assert hub.get_last_price("AAPL") == SYMBOL_PROFILES["AAPL"].base

    def test_seeded_from_daily_tail(self):
        """Seeding uses the last close of the 1D sequence."""
        hub = make_hub()
        hub.seed_prices()

        for symbol in SYMBOL_PROFILES:
            expected = generate_bars(symbol, "1D", now=NOW)[-1].close
            assert hub.get_last_price(symbol) == expected


class TestTick:
    """Tests for a single tick round."""

    def test_subscriber_called_once_within_bounds(self):
        """One tick invokes the callback once with a small move."""
        hub = make_hub()
        hub.seed_prices()
        prior = hub.get_last_price("AAPL")
        received = []
        hub.subscribe("AAPL", received.append)

        hub.tick()

        assert len(received) == 1
        bound = SYMBOL_PROFILES["AAPL"].volatility / 20 * 1.5
        assert abs(float(received[0]) / float(prior) - 1) <= bound
        assert received[0] == hub.get_last_price("AAPL")

    def test_first_tick_seeds_from_history(self):
        """Ticking an unseeded hub moves from the 1D tail close, not the base."""
        hub = make_hub()
        received = []
        hub.subscribe("AAPL", received.append)

        hub.tick()

        seeded = generate_bars("AAPL", "1D", now=NOW)[-1].close
        bound = SYMBOL_PROFILES["AAPL"].volatility / 20 * 1.5
        assert len(received) == 1
        assert abs(float(received[0]) / float(seeded) - 1) <= bound

    def test_later_ticks_do_not_reseed(self):
        """Only the first tick seeds; later ticks build on the last price."""
        hub = make_hub()
        hub.tick()

        with patch.object(hub, "seed_prices") as seed:
            hub.tick()

        seed.assert_not_called()

    def test_tick_updates_every_symbol(self):
        """Every known symbol gets a new, 4-place price."""
        hub = make_hub()
        updated = hub.tick()

        assert set(updated) == set(SYMBOL_PROFILES)
        for symbol, price in updated.items():
            assert price.as_tuple().exponent == -4
            assert hub.get_last_price(symbol) == price

    def test_registration_order(self):
        """Multiple subscribers run in registration order."""
        hub = make_hub()
        calls = []
        hub.subscribe("TSLA", lambda p: calls.append("first"))
        hub.subscribe("TSLA", lambda p: calls.append("second"))
        hub.subscribe("TSLA", lambda p: calls.append("third"))

        hub.tick()
        hub.tick()

        assert calls == ["first", "second", "third"] * 2

    def test_only_matching_symbol_notified(self):
        """Subscribers only hear about their own symbol."""
        hub = make_hub()
        received = []
        hub.subscribe("SPY", received.append)

        hub.tick()

        assert received == [hub.get_last_price("SPY")]

    def test_failing_callback_does_not_block_others(self, caplog):
        """A raising subscriber is logged and later subscribers still run."""
        hub = make_hub()
        received = []

        def broken(price):
            raise RuntimeError("boom")

        hub.subscribe("AAPL", broken)
        hub.subscribe("AAPL", received.append)

        hub.tick()

        assert len(received) == 1
        assert "Tick callback error for AAPL" in caplog.text

    def test_unsubscribe(self):
        """Removed callbacks are no longer invoked."""
        hub = make_hub()
        received = []
        hub.subscribe("AAPL", received.append)

        assert hub.unsubscribe("AAPL", received.append) is True
        assert hub.unsubscribe("AAPL", received.append) is False

        hub.tick()
        assert received == []

    def test_same_seed_same_path(self):
        """Hubs with equal RNG seeds produce equal price paths."""
        a = make_hub(seed=7)
        b = make_hub(seed=7)

        assert [a.tick() for _ in range(5)] == [b.tick() for _ in range(5)]

    def test_hubs_are_independent(self):
        """Ticking one hub leaves another untouched."""
        a = make_hub()
        b = make_hub()
        b.seed_prices()
        before = {s: b.get_last_price(s) for s in SYMBOL_PROFILES}

        for _ in range(3):
            a.tick()

        assert {s: b.get_last_price(s) for s in SYMBOL_PROFILES} == before


class TestTickLoop:
    """Tests for the background tick task."""

    @pytest.mark.asyncio
    async def test_start_seeds_and_ticks(self):
        """The task seeds prices and ticks on its interval."""
        hub = make_hub(tick_interval=0.01)
        received = []
        hub.subscribe("AAPL", received.append)

        await hub.start()
        try:
            assert hub.is_running
            await asyncio.sleep(0.1)
        finally:
            await hub.stop()

        assert len(received) >= 1
        assert not hub.is_running

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        """Starting twice does not schedule a second task."""
        hub = make_hub(tick_interval=10)

        await hub.start()
        task = hub._task
        await hub.start()
        try:
            assert hub._task is task
        finally:
            await hub.stop()

        assert task.done()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        """Stopping an idle hub is a no-op."""
        hub = make_hub()
        await hub.stop()
        assert not hub.is_running

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        """A stopped hub can be started again."""
        hub = make_hub(tick_interval=0.01)

        await hub.start()
        await hub.stop()
        await hub.start()
        try:
            assert hub.is_running
            assert not hub._task.done()
        finally:
            await hub.stop()

    @pytest.mark.asyncio
    async def test_failed_seed_leaves_hub_stopped(self):
        """If seeding raises, start propagates it and the hub stays stopped."""
        hub = make_hub(tick_interval=0.01)

        with patch.object(hub, "seed_prices", side_effect=RuntimeError("no history")):
            with pytest.raises(RuntimeError):
                await hub.start()

        assert not hub.is_running
        assert hub._task is None

        await hub.start()
        try:
            assert hub.is_running
        finally:
            await hub.stop()
