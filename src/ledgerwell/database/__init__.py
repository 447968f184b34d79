"""Database layer for ledgerwell application."""

from ledgerwell.database.base import Database
from ledgerwell.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
