"""Data storage for parsed records using SQLAlchemy."""

from .models import Base, StoredField, StoredMessage
from .database import Database, init_db
from .sink import DatabaseSink

__all__ = [
    "Base",
    "StoredField",
    "StoredMessage",
    "Database",
    "init_db",
    "DatabaseSink",
]
