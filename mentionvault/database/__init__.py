"""Persistence of participants and active user identities."""

from .manager import DatabaseManager

__all__ = ["DatabaseManager"]
