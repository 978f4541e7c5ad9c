"""Business services."""

from chartapp.services.bar_source import BarSource, LoadedBars
from chartapp.services.tick_hub import TickCallback, TickHub

__all__ = [
    "BarSource",
    "LoadedBars",
    "TickHub",
    "TickCallback",
]
