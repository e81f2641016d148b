"""Errors raised by the contacts data layer."""


class ContactBookError(Exception):
    """Base class for data-layer failures."""


class ConnectionFailure(ContactBookError):
    """The database could not be reached, authenticated to, or its driver loaded."""


class StatementFailure(ContactBookError):
    """The database rejected a statement."""
