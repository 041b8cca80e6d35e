"""Persisted capture state."""

from .session import SessionDefaults

__all__ = ["SessionDefaults"]
