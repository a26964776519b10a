"""System acts emitted by controls."""
