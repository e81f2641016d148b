"""Contacts module: records, connection handling and SQL storage."""

from .connection import ConnectionProvider, Dialect
from .errors import ConnectionFailure, ContactBookError, StatementFailure
from .models import Contact
from .repository import ContactRepository

__all__ = [
    "ConnectionFailure",
    "ConnectionProvider",
    "Contact",
    "ContactBookError",
    "ContactRepository",
    "Dialect",
    "StatementFailure",
]
