"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import ENV_PREFIX, optional_env_var

APP_DIR_NAME: Final[str] = "upserter"
DEFAULT_DB_FILENAME: Final[str] = "upserter.db"
IN_MEMORY_DATABASE_URI: Final[str] = "sqlite+pysqlite:///:memory:"

DATA_DIR_ENV: Final[str] = f"{ENV_PREFIX}DATA_DIR"
DATABASE_URI_ENV: Final[str] = f"{ENV_PREFIX}DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self) -> Path:
        return self.ensure_data_dir() / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    @property
    def is_in_memory(self) -> bool:
        return self.uri.endswith(":memory:")


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, persistent: bool = False) -> DatabaseConfig:
    """Resolve the database URI.

    An explicit ``UPSERTER_DATABASE_URI`` always wins. Otherwise the example
    runs against in-memory SQLite, or a file in the data directory when
    ``persistent`` is set.
    """

    env_uri = optional_env_var(DATABASE_URI_ENV)
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    if persistent:
        return DatabaseConfig(uri=get_storage_config().database_uri())
    return DatabaseConfig(uri=IN_MEMORY_DATABASE_URI)
