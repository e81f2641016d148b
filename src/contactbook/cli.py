"""Interactive menu for the contact book."""

from collections.abc import Callable

from .contacts import Contact, ContactBookError, ContactRepository
from .logging import JSONLLogger, get_logger

MENU = """
====== Contact Book Menu ======
1. Add Contact
2. View All Contacts
3. Search by Name
4. Update Contact
5. Delete Contact
6. Exit"""

EXIT_CHOICE = 6


class CLI:
    """Interactive command-line interface for the contact book."""

    def __init__(
        self,
        repository: ContactRepository,
        logger: JSONLLogger | None = None,
    ) -> None:
        self.repository = repository
        self.logger = logger or get_logger()
        self._actions: dict[int, tuple[str, Callable[[], None]]] = {
            1: ("create", self._add_contact),
            2: ("list_all", self._view_all),
            3: ("search", self._search),
            4: ("update", self._update_contact),
            5: ("delete", self._delete_contact),
        }

    def _read_int(self, prompt: str) -> int | None:
        """Read an integer. Prints an error and returns None on bad input."""
        raw = input(prompt).strip()
        try:
            return int(raw)
        except ValueError:
            print("❌ Invalid input. Please enter a number.")
            return None

    def _read_fields(self, prefix: str = "") -> tuple[str, str, str, str]:
        """Prompt for name, phone, email and address, in that order."""
        name = input(f"{prefix}Name: ")
        phone = input(f"{prefix}Phone Number: ")
        email = input(f"{prefix}Email: ")
        address = input(f"{prefix}Address: ")
        return name, phone, email, address

    def _print_contacts(self, title: str, contacts: list[Contact]) -> None:
        print(f"\n--- {title} ---")
        for contact in contacts:
            print(contact.display())

    def _add_contact(self) -> None:
        name, phone, email, address = self._read_fields()
        saved = self.repository.create(
            Contact(name=name, phone_number=phone, email=email, address=address)
        )
        print(f"✅ Contact added successfully! (ID: {saved.id})")
        self.logger.log_operation("create", True, contact_id=saved.id)

    def _view_all(self) -> None:
        contacts = self.repository.list_all()
        if not contacts:
            print("No contacts found.")
        else:
            self._print_contacts("All Contacts", contacts)
        self.logger.log_operation("list_all", True, count=len(contacts))

    def _search(self) -> None:
        pattern = input("Enter name to search: ")
        results = self.repository.search(pattern)
        if not results:
            print("No contacts found with that name.")
        else:
            self._print_contacts("Search Results", results)
        self.logger.log_operation("search", True, count=len(results))

    def _update_contact(self) -> None:
        contact_id = self._read_int("Enter ID of contact to update: ")
        if contact_id is None:
            return

        current = self.repository.get(contact_id)
        if current is not None:
            print(f"Current: {current.display()}")

        name, phone, email, address = self._read_fields(prefix="New ")
        updated = self.repository.update(
            Contact(
                id=contact_id,
                name=name,
                phone_number=phone,
                email=email,
                address=address,
            )
        )
        if updated:
            print("✅ Contact updated successfully!")
        else:
            print("❌ Contact not found. Update failed.")
        self.logger.log_operation("update", updated, contact_id=contact_id)

    def _delete_contact(self) -> None:
        contact_id = self._read_int("Enter ID of contact to delete: ")
        if contact_id is None:
            return

        deleted = self.repository.delete(contact_id)
        if deleted:
            print("🗑️ Contact deleted successfully!")
        else:
            print("❌ Contact not found. Deletion failed.")
        self.logger.log_operation("delete", deleted, contact_id=contact_id)

    def handle_choice(self, choice: int) -> bool:
        """Run a menu choice. Returns True if should continue, False to exit."""
        if choice == EXIT_CHOICE:
            print("👋 Exiting Contact Book. Goodbye!")
            self.logger.log("session_end")
            return False

        action = self._actions.get(choice)
        if action is None:
            print("❌ Invalid option. Please choose a number between 1 and 6.")
            return True

        operation, handler = action
        try:
            handler()
        except ContactBookError as e:
            print(f"\n❌ Error: {e}")
            self.logger.log_failure(operation, str(e))
        return True

    def run(self) -> None:
        """Run the interactive menu until the user exits."""
        self.logger.log("session_start")

        while True:
            try:
                print(MENU)
                choice = self._read_int("Choose an option (1-6): ")
                if choice is None:
                    continue

                if not self.handle_choice(choice):
                    break

            except (EOFError, KeyboardInterrupt):
                print("\n👋 Goodbye!")
                self.logger.log("session_end")
                break
