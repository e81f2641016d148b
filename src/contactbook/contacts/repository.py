"""SQL storage for contacts."""

import logging
from typing import Any

from .connection import ConnectionProvider
from .models import Contact

logger = logging.getLogger(__name__)

COLUMNS = "id, name, phone_number, email, address"


class ContactRepository:
    """CRUD access to the contacts table.

    Each method acquires its own connection from the provider and releases
    it before returning. All values are bound as statement parameters.

    Failures are raised as ConnectionFailure or StatementFailure from
    contactbook.contacts.errors.
    """

    def __init__(self, provider: ConnectionProvider) -> None:
        """Initialize the repository with a connection provider.

        Args:
            provider: Source of database connections.
        """
        self.provider = provider
        self._dialect = provider.dialect

    def init_schema(self) -> None:
        """Create the contacts table if it doesn't exist."""
        with self.provider.acquire("init_schema") as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS contacts (
                    id            {self._dialect.id_column},
                    name          TEXT NOT NULL,
                    phone_number  TEXT NOT NULL,
                    email         TEXT NOT NULL,
                    address       TEXT NOT NULL
                )
            """)

    def create(self, contact: Contact) -> Contact:
        """Insert a new contact.

        Args:
            contact: The contact to save. Must not carry an id.

        Returns:
            The contact with its database-assigned id.

        Raises:
            ValueError: If the contact already has an id.
        """
        if contact.id is not None:
            raise ValueError("New contacts must not carry an id")

        with self.provider.acquire("create") as conn:
            cursor = conn.execute(
                self._sql(
                    """
                    INSERT INTO contacts (name, phone_number, email, address)
                    VALUES (?, ?, ?, ?)
                    RETURNING id
                    """
                ),
                (contact.name, contact.phone_number, contact.email, contact.address),
            )
            # Drain so the statement has finished before commit
            (row,) = cursor.fetchall()

        saved = contact.with_id(row["id"])
        logger.info("Created contact %d", saved.id)
        return saved

    def list_all(self) -> list[Contact]:
        """Get all contacts, in the order the database returns them.

        Returns:
            List of all stored contacts, empty if there are none.
        """
        with self.provider.acquire("list_all") as conn:
            cursor = conn.execute(f"SELECT {COLUMNS} FROM contacts")
            return [self._row_to_contact(row) for row in cursor.fetchall()]

    def search(self, name_pattern: str) -> list[Contact]:
        """Get contacts whose name contains name_pattern.

        The pattern is wrapped in '%' wildcards and passed to LIKE as-is, so
        '%' and '_' inside it also act as wildcards. Case sensitivity follows
        the database collation.

        Args:
            name_pattern: Substring to look for in contact names.

        Returns:
            List of matching contacts, empty if none match.
        """
        with self.provider.acquire("search") as conn:
            cursor = conn.execute(
                self._sql(f"SELECT {COLUMNS} FROM contacts WHERE name LIKE ?"),
                (f"%{name_pattern}%",),
            )
            return [self._row_to_contact(row) for row in cursor.fetchall()]

    def get(self, contact_id: int) -> Contact | None:
        """Get a contact by its id.

        Args:
            contact_id: The id to look up.

        Returns:
            The contact if found, None otherwise.
        """
        with self.provider.acquire("get") as conn:
            cursor = conn.execute(
                self._sql(f"SELECT {COLUMNS} FROM contacts WHERE id = ?"),
                (contact_id,),
            )
            row = cursor.fetchone()
        return self._row_to_contact(row) if row is not None else None

    def update(self, contact: Contact) -> bool:
        """Overwrite every field of the contact with the same id.

        Args:
            contact: The new values. Must carry the id of the row to change.

        Returns:
            True if a contact was updated, False if no contact has that id.

        Raises:
            ValueError: If the contact has no id.
        """
        if contact.id is None:
            raise ValueError("Cannot update a contact without an id")

        with self.provider.acquire("update") as conn:
            cursor = conn.execute(
                self._sql(
                    """
                    UPDATE contacts
                    SET name = ?, phone_number = ?, email = ?, address = ?
                    WHERE id = ?
                    """
                ),
                (
                    contact.name,
                    contact.phone_number,
                    contact.email,
                    contact.address,
                    contact.id,
                ),
            )
            updated = cursor.rowcount > 0

        if updated:
            logger.info("Updated contact %d", contact.id)
        return updated

    def delete(self, contact_id: int) -> bool:
        """Delete a contact by its id.

        Args:
            contact_id: The id of the contact to delete.

        Returns:
            True if a contact was deleted, False otherwise.
        """
        with self.provider.acquire("delete") as conn:
            cursor = conn.execute(
                self._sql("DELETE FROM contacts WHERE id = ?"), (contact_id,)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Deleted contact %d", contact_id)
        return deleted

    def _sql(self, query: str) -> str:
        return self._dialect.render(query)

    def _row_to_contact(self, row: Any) -> Contact:
        """Convert a database row to a Contact."""
        return Contact(
            id=row["id"],
            name=row["name"],
            phone_number=row["phone_number"],
            email=row["email"],
            address=row["address"],
        )
