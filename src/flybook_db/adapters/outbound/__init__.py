"""Outbound adapters - storage implementations."""

from flybook_db.adapters.outbound.sqlite_connection_provider import SQLiteConnectionProvider

__all__ = ["SQLiteConnectionProvider"]
