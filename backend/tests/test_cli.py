"""Tests for the command-line entry point."""

import orjson
import pytest

from chartapp.__main__ import main


class TestCli:
    """Tests for python -m chartapp."""

    def test_symbols(self, capsys):
        """Lists the static tables."""
        assert main(["symbols"]) == 0

        output = orjson.loads(capsys.readouterr().out)
        assert "AAPL" in output["symbols"]
        assert output["symbols"]["AAPL"]["name"] == "Apple Inc."
        assert output["timeframes"]["1D"] == {"period_seconds": 86400, "bar_count": 500}

    def test_bars_with_limit(self, capsys):
        """Prints the last N synthetic bars."""
        assert main(["bars", "AAPL", "1D", "--limit", "3"]) == 0

        output = orjson.loads(capsys.readouterr().out)
        assert output["real"] is False
        assert len(output["bars"]) == 3
        times = [b["time"] for b in output["bars"]]
        assert times == sorted(times)

    def test_bars_unknown_symbol(self, capsys):
        """Unknown symbols exit non-zero."""
        assert main(["bars", "XXX-NONE", "1D"]) == 1

    def test_indicators(self, capsys):
        """Prints the latest indicator values."""
        assert main(["indicators", "MSFT", "1h"]) == 0

        latest = orjson.loads(capsys.readouterr().out)["latest"]
        assert 0 <= latest["rsi"] <= 100
        assert "ema50" in latest
        assert latest["bb_lower"] <= latest["bb_middle"] <= latest["bb_upper"]

    def test_requires_command(self):
        """A command is mandatory."""
        with pytest.raises(SystemExit):
            main([])

    @pytest.mark.parametrize("limit", ["0", "-3", "abc"])
    def test_bars_rejects_bad_limit(self, limit, capsys):
        """--limit must be a positive integer."""
        with pytest.raises(SystemExit) as exc_info:
            main(["bars", "AAPL", "1D", "--limit", limit])

        assert exc_info.value.code == 2
        assert capsys.readouterr().out == ""

    def test_indicators_overlay_keys(self, capsys):
        """Moving averages are reported per configured period."""
        assert main(["indicators", "AAPL", "1D"]) == 0

        latest = orjson.loads(capsys.readouterr().out)["latest"]
        assert {"sma9", "sma20", "ema50"} <= set(latest)
