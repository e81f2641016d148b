"""Console address book backed by a relational contacts table."""

__version__ = "0.1.0"
