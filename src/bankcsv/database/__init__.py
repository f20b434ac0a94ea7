"""Database layer for bankcsv application."""

from bankcsv.database.base import Database
from bankcsv.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
