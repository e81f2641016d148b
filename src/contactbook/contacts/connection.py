"""Connection acquisition for the contacts database.

Every repository operation opens its own connection through
ConnectionProvider.acquire() and the connection is closed when the
with-block exits, whether it succeeded or not. There is no pooling.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config import DatabaseConfig
from .errors import ConnectionFailure, StatementFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dialect:
    """SQL differences between the supported backends.

    Attributes:
        placeholder: Positional parameter marker used by the driver.
        id_column: Column definition for the auto-incrementing primary key.
    """

    placeholder: str
    id_column: str

    def render(self, query: str) -> str:
        """Rewrite a query written with '?' markers for this driver."""
        if self.placeholder == "?":
            return query
        return query.replace("?", self.placeholder)


SQLITE = Dialect(placeholder="?", id_column="INTEGER PRIMARY KEY AUTOINCREMENT")
POSTGRESQL = Dialect(placeholder="%s", id_column="SERIAL PRIMARY KEY")

DIALECTS = {
    "sqlite": SQLITE,
    "postgresql": POSTGRESQL,
}


class ConnectionProvider:
    """Opens connections to the database described by a DatabaseConfig."""

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self.dialect = DIALECTS[config.backend]

    @contextmanager
    def acquire(self, operation: str = "query") -> Iterator[Any]:
        """Open a connection for the duration of a with-block.

        The connection is committed when the block completes, rolled back
        when it raises, and closed in both cases. Driver errors raised
        inside the block are re-raised as StatementFailure.

        Args:
            operation: Name of the operation, used in log messages.

        Yields:
            A DB-API connection whose rows support access by column name.

        Raises:
            ConnectionFailure: If the connection cannot be opened.
            StatementFailure: If the database rejects a statement.
        """
        conn, driver_error = self._connect()
        try:
            yield conn
            conn.commit()
        except driver_error as e:
            self._rollback(conn, driver_error)
            logger.error("%s failed on %s: %s", operation, self.config.describe(), e)
            raise StatementFailure(str(e)) from e
        except BaseException:
            self._rollback(conn, driver_error)
            raise
        finally:
            self._close(conn, driver_error)

    def _rollback(self, conn: Any, driver_error: type[Exception]) -> None:
        """Roll back, logging rather than raising if the connection is unusable."""
        try:
            conn.rollback()
        except driver_error as e:
            logger.warning("Rollback failed on %s: %s", self.config.describe(), e)

    def _close(self, conn: Any, driver_error: type[Exception]) -> None:
        try:
            conn.close()
        except driver_error as e:
            logger.warning("Close failed on %s: %s", self.config.describe(), e)

    def _connect(self) -> tuple[Any, type[Exception]]:
        """Open a new connection. Returns (connection, driver error class)."""
        if self.config.backend == "postgresql":
            return self._connect_postgresql()
        return self._connect_sqlite()

    def _connect_sqlite(self) -> tuple[sqlite3.Connection, type[Exception]]:
        db_path = Path(self.config.database)
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(db_path)
        except (OSError, sqlite3.Error) as e:
            logger.error("Cannot open %s: %s", self.config.describe(), e)
            raise ConnectionFailure(f"Cannot open database {db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        return conn, sqlite3.Error

    def _connect_postgresql(self) -> tuple[Any, type[Exception]]:
        try:
            import psycopg
            from psycopg.rows import dict_row
        except ImportError as e:
            raise ConnectionFailure(
                "PostgreSQL driver unavailable. Install with: pip install 'contactbook[postgres]'"
            ) from e

        try:
            conn = psycopg.connect(
                host=self.config.host,
                port=self.config.port,
                dbname=self.config.database,
                user=self.config.user,
                password=self.config.password,
                row_factory=dict_row,
            )
        except psycopg.Error as e:
            logger.error("Cannot connect to %s: %s", self.config.describe(), e)
            raise ConnectionFailure(f"Cannot connect to database: {e}") from e

        return conn, psycopg.Error
