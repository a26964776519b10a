"""Core types shared by every control."""
