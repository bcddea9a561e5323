"""SQLite adapter for sqlcompose."""

from sqlcompose.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlcompose.adapters.sqlite.driver import SqliteDriver, SqliteRows

__all__ = ("SqliteConfig", "SqliteConnectionParams", "SqliteDriver", "SqliteRows")
