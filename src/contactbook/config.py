"""Database configuration loader.

Loads connection settings from ~/.contactbook/config.json and lets
CONTACTBOOK_DB_* environment variables (or a .env file) override them.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".contactbook" / "config.json"
DEFAULT_SQLITE_PATH = Path.home() / ".contactbook" / "contacts.db"

BACKENDS = ("sqlite", "postgresql")

# Config field -> environment variable
ENV_VARS = {
    "backend": "CONTACTBOOK_DB_BACKEND",
    "host": "CONTACTBOOK_DB_HOST",
    "port": "CONTACTBOOK_DB_PORT",
    "database": "CONTACTBOOK_DB_NAME",
    "user": "CONTACTBOOK_DB_USER",
    "password": "CONTACTBOOK_DB_PASSWORD",
}


@dataclass
class DatabaseConfig:
    """Connection settings for the contacts database.

    Attributes:
        backend: 'sqlite' for a local file database, 'postgresql' for a server.
        host: Server host name (ignored by sqlite).
        port: Server port (ignored by sqlite).
        database: Database name, or the file path for sqlite.
        user: Login user (ignored by sqlite).
        password: Login password (ignored by sqlite).
    """

    backend: str = "sqlite"
    host: str = "localhost"
    port: int = 5432
    database: str = field(default_factory=lambda: str(DEFAULT_SQLITE_PATH))
    user: str = ""
    password: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        """Validate config values."""
        self.backend = self.backend.lower().strip()
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown database backend '{self.backend}'. "
                f"Expected one of: {', '.join(BACKENDS)}"
            )

        if not 1 <= self.port <= 65535:
            raise ValueError("port must be between 1 and 65535")

        if self.backend == "sqlite" and self.database.strip() == ":memory:":
            raise ValueError(
                "An in-memory sqlite database does not outlive a single operation; "
                "use a file path"
            )

    def describe(self) -> str:
        """Describe the target database without exposing the password."""
        if self.backend == "sqlite":
            return f"sqlite:{self.database}"
        return f"{self.backend}://{self.user}@{self.host}:{self.port}/{self.database}"


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DatabaseConfig:
    """Load DatabaseConfig from a JSON file and the environment.

    The config file should have this structure:
    ```json
    {
      "database": {
        "backend": "postgresql",
        "host": "localhost",
        "port": 5432,
        "database": "contact_book",
        "user": "contacts"
      }
    }
    ```

    Environment variables listed in ENV_VARS take precedence over the file.

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.
        environ: Environment mapping. Uses os.environ if None.

    Returns:
        DatabaseConfig instance with loaded values.

    Raises:
        ValueError: If a value is invalid (unknown backend, bad port).
    """
    path = config_path or DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ

    values = _read_config_file(path)
    values.update(_env_overrides(env))
    return _parse_config(values)


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read the 'database' section of a config file, or {} if unusable."""
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        return {}
    except OSError as e:
        logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        return {}

    section = data.get("database", {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        logger.warning("'database' in %s is not an object. Using defaults.", path)
        return {}

    return {key: value for key, value in section.items() if key in ENV_VARS}


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect config values set in the environment."""
    overrides: dict[str, Any] = {}
    for key, var in ENV_VARS.items():
        value = env.get(var)
        if value is not None and value != "":
            overrides[key] = value
    return overrides


def _parse_config(values: dict[str, Any]) -> DatabaseConfig:
    """Build a DatabaseConfig from raw values.

    Args:
        values: Mapping of config field names to raw values.

    Returns:
        DatabaseConfig instance.
    """
    kwargs: dict[str, Any] = {}

    for key in ("backend", "host", "database", "user", "password"):
        if key in values:
            kwargs[key] = str(values[key])

    if "port" in values:
        try:
            kwargs["port"] = int(values["port"])
        except (TypeError, ValueError):
            raise ValueError(f"port must be an integer, got {values['port']!r}") from None

    if "database" in kwargs and kwargs.get("backend", "sqlite").lower().strip() == "sqlite":
        kwargs["database"] = str(Path(kwargs["database"]).expanduser())

    return DatabaseConfig(**kwargs)
