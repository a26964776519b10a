"""Turn driver and state persistence."""
