"""Interaction-model export."""
