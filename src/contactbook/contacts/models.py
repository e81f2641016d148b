"""Data models for the address book."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Contact:
    """A single address-book entry.

    Attributes:
        name: Contact name.
        phone_number: Phone number, free-form text.
        email: Email address, free-form text.
        address: Postal address, free-form text.
        id: Database ID, None until the contact is persisted.
    """

    name: str
    phone_number: str
    email: str
    address: str
    id: int | None = None

    def with_id(self, contact_id: int) -> "Contact":
        """Return a copy of this contact carrying the given id."""
        return replace(self, id=contact_id)

    def display(self) -> str:
        """Human-readable one-line rendering for the console."""
        return (
            f"ID: {self.id} | Name: {self.name} | Phone: {self.phone_number} | "
            f"Email: {self.email} | Address: {self.address}"
        )
