"""Shared two-shift care rota: shift resolution and document synchronization."""

__version__ = "1.0.0"
