"""Prompt tables and response assembly."""
