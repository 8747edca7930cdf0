"""Settings and environment loading."""
