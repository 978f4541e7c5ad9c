"""Chart viewer data services: live ticks, quote fetching and settings."""
