"""Tests for CLI."""

import json
import sqlite3
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from contactbook.cli import CLI
from contactbook.config import DatabaseConfig
from contactbook.contacts import ConnectionProvider, Contact, ContactRepository
from contactbook.logging import JSONLLogger


def feed_input(monkeypatch, *answers: str) -> None:
    """Replace input() with a script of answers, then EOF."""
    remaining = iter(answers)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


@pytest.fixture
def event_logger(tmp_path: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=tmp_path / "logs")


@pytest.fixture
def repository(tmp_path: Path) -> ContactRepository:
    provider = ConnectionProvider(DatabaseConfig(database=str(tmp_path / "contacts.db")))
    repository = ContactRepository(provider)
    repository.init_schema()
    return repository


@pytest.fixture
def cli(repository: ContactRepository, event_logger: JSONLLogger) -> CLI:
    return CLI(repository, logger=event_logger)


def log_events(event_logger: JSONLLogger) -> list[dict]:
    with open(event_logger.log_path) as f:
        return [json.loads(line) for line in f]


def test_exit_option(cli: CLI, monkeypatch, capsys) -> None:
    """Test that option 6 ends the loop."""
    feed_input(monkeypatch, "6", "2")
    cli.run()

    out = capsys.readouterr().out
    assert "Goodbye" in out
    assert out.count("Contact Book Menu") == 1


def test_menu_lists_six_options(cli: CLI, monkeypatch, capsys) -> None:
    """Test the menu shows every option."""
    feed_input(monkeypatch, "6")
    cli.run()

    out = capsys.readouterr().out
    for label in (
        "1. Add Contact",
        "2. View All Contacts",
        "3. Search by Name",
        "4. Update Contact",
        "5. Delete Contact",
        "6. Exit",
    ):
        assert label in out


def test_invalid_input_redisplays_menu(cli: CLI, monkeypatch, capsys) -> None:
    """Test non-numeric input is reported and the menu is shown again."""
    feed_input(monkeypatch, "abc", "6")
    cli.run()

    out = capsys.readouterr().out
    assert "Invalid input. Please enter a number." in out
    assert out.count("Contact Book Menu") == 2


def test_out_of_range_option(cli: CLI, monkeypatch, capsys) -> None:
    """Test numbers outside 1-6 are rejected without exiting."""
    feed_input(monkeypatch, "7", "0", "6")
    cli.run()

    out = capsys.readouterr().out
    assert out.count("Invalid option. Please choose a number between 1 and 6.") == 2
    assert out.count("Contact Book Menu") == 3


def test_eof_ends_loop(cli: CLI, monkeypatch, capsys) -> None:
    """Test end of input exits like option 6."""
    feed_input(monkeypatch)
    cli.run()

    assert "Goodbye" in capsys.readouterr().out


def test_add_then_view(cli: CLI, monkeypatch, capsys) -> None:
    """Test adding a contact and listing it."""
    feed_input(
        monkeypatch,
        "1", "Jane Doe", "555-1234", "jane@x.com", "1 Main St",
        "2",
        "6",
    )
    cli.run()

    out = capsys.readouterr().out
    assert "Contact added successfully!" in out
    assert "--- All Contacts ---" in out
    assert (
        "ID: 1 | Name: Jane Doe | Phone: 555-1234 | "
        "Email: jane@x.com | Address: 1 Main St"
    ) in out


def test_add_accepts_empty_fields(cli: CLI, repository: ContactRepository, monkeypatch) -> None:
    """Test empty answers are stored as empty strings."""
    feed_input(monkeypatch, "1", "", "", "", "", "6")
    cli.run()

    contacts = repository.list_all()
    assert len(contacts) == 1
    assert contacts[0].name == ""


def test_view_empty(cli: CLI, monkeypatch, capsys) -> None:
    """Test listing an empty book."""
    feed_input(monkeypatch, "2", "6")
    cli.run()

    assert "No contacts found." in capsys.readouterr().out


def test_search(cli: CLI, repository: ContactRepository, monkeypatch, capsys) -> None:
    """Test searching by part of a name."""
    repository.create(Contact(name="Alice Smith", phone_number="1", email="", address=""))
    repository.create(Contact(name="Bob Alan", phone_number="2", email="", address=""))
    feed_input(monkeypatch, "3", "Smith", "3", "Zed", "6")
    cli.run()

    out = capsys.readouterr().out
    assert "--- Search Results ---" in out
    assert "Alice Smith" in out
    assert "Bob Alan" not in out
    assert "No contacts found with that name." in out


def test_update(cli: CLI, repository: ContactRepository, monkeypatch, capsys) -> None:
    """Test updating an existing contact."""
    saved = repository.create(
        Contact(name="Jane", phone_number="1", email="a", address="x")
    )
    feed_input(monkeypatch, "4", str(saved.id), "Jane Roe", "2", "b", "y", "6")
    cli.run()

    out = capsys.readouterr().out
    assert "Current: ID: 1 | Name: Jane" in out
    assert "Contact updated successfully!" in out
    assert repository.get(saved.id) == Contact(
        id=saved.id, name="Jane Roe", phone_number="2", email="b", address="y"
    )


def test_update_unknown_id(cli: CLI, monkeypatch, capsys) -> None:
    """Test updating a missing contact reports not found."""
    feed_input(monkeypatch, "4", "99", "a", "b", "c", "d", "6")
    cli.run()

    out = capsys.readouterr().out
    assert "Contact not found. Update failed." in out
    assert "Current:" not in out


def test_update_non_numeric_id(cli: CLI, monkeypatch, capsys) -> None:
    """Test a non-numeric id goes back to the menu."""
    feed_input(monkeypatch, "4", "x", "6")
    cli.run()

    out = capsys.readouterr().out
    assert "Invalid input. Please enter a number." in out
    assert out.count("Contact Book Menu") == 2


def test_delete(cli: CLI, repository: ContactRepository, monkeypatch, capsys) -> None:
    """Test deleting a contact, then deleting it again."""
    saved = repository.create(Contact(name="Jane", phone_number="", email="", address=""))
    feed_input(monkeypatch, "5", str(saved.id), "5", str(saved.id), "6")
    cli.run()

    out = capsys.readouterr().out
    assert "Contact deleted successfully!" in out
    assert "Contact not found. Deletion failed." in out
    assert repository.list_all() == []


def test_failure_does_not_end_loop(tmp_path: Path, event_logger: JSONLLogger, monkeypatch, capsys) -> None:
    """Test a database error is reported and the menu keeps running."""
    # No init_schema: the contacts table is missing
    provider = ConnectionProvider(DatabaseConfig(database=str(tmp_path / "empty.db")))
    cli = CLI(ContactRepository(provider), logger=event_logger)
    feed_input(monkeypatch, "2", "1", "Jane", "", "", "", "6")
    cli.run()

    out = capsys.readouterr().out
    assert out.count("Error: no such table: contacts") == 2
    assert out.count("Contact Book Menu") == 3
    assert "Exiting Contact Book" in out

    failures = [e for e in log_events(event_logger) if e["event"] == "operation_failed"]
    assert [e["operation"] for e in failures] == ["list_all", "create"]


def test_lost_connection_does_not_end_loop(repository: ContactRepository, event_logger: JSONLLogger, monkeypatch, capsys) -> None:
    """Test a failed rollback on a lost connection still reports the error and keeps the menu running."""
    conn = MagicMock()
    conn.execute.side_effect = sqlite3.OperationalError("disk I/O error")
    conn.rollback.side_effect = sqlite3.OperationalError("cannot rollback - connection lost")
    cli = CLI(repository, logger=event_logger)
    feed_input(monkeypatch, "2", "6")

    with patch("contactbook.contacts.connection.sqlite3.connect", return_value=conn):
        cli.run()

    out = capsys.readouterr().out
    assert "Error: disk I/O error" in out
    assert out.count("Contact Book Menu") == 2
    assert "Exiting Contact Book" in out

    failures = [e for e in log_events(event_logger) if e["event"] == "operation_failed"]
    assert [e["operation"] for e in failures] == ["list_all"]


def test_handle_choice_exit(cli: CLI) -> None:
    """Test exit choice returns False."""
    assert cli.handle_choice(6) is False


def test_handle_choice_invalid(cli: CLI) -> None:
    """Test invalid choice returns True."""
    assert cli.handle_choice(42) is True


def test_operations_logged(cli: CLI, event_logger: JSONLLogger, monkeypatch) -> None:
    """Test each operation writes an event."""
    feed_input(monkeypatch, "1", "Jane", "", "", "", "5", "99", "6")
    cli.run()

    events = log_events(event_logger)
    assert events[0]["event"] == "session_start"
    assert events[-1]["event"] == "session_end"

    operations = [e for e in events if e["event"] == "operation"]
    assert operations[0]["operation"] == "create"
    assert operations[0]["contact_id"] == 1
    assert operations[1]["operation"] == "delete"
    assert operations[1]["success"] is False
