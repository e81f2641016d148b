"""Contact book entry point."""

import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import CLI
from .config import load_config
from .contacts import ConnectionProvider, ContactBookError, ContactRepository
from .logging import configure_logger


def _configure_logging() -> None:
    level = os.getenv("CONTACTBOOK_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def main() -> int:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging()

    try:
        config = load_config()
    except ValueError as e:
        print(f"❌ Error: invalid database configuration: {e}")
        return 1

    try:
        event_logger = configure_logger(log_dir=os.getenv("CONTACTBOOK_LOG_DIR") or None)
    except OSError as e:
        print(f"❌ Error: cannot create log directory: {e}")
        return 1
    repository = ContactRepository(ConnectionProvider(config))

    try:
        repository.init_schema()
    except ContactBookError as e:
        # Menu still runs; each operation reports its own failure
        print(f"⚠ Could not prepare {config.describe()}: {e}")

    CLI(repository, logger=event_logger).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
