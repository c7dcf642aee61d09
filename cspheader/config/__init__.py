"""Settings and preset policies."""
