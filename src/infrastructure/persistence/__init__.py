"""Persistence adapters (in-memory reference backend)."""
