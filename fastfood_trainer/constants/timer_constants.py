"""Timer settings for the host-owned session scheduler."""

TICK_INTERVAL_MS: int = 1000
