"""Per-client purchase gate backed by a shared key-value store."""
