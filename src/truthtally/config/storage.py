"""Location of the SQLite database unless ``DATABASE_URI`` points elsewhere."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_str

DATA_DIR_ENV: Final[str] = "TRUTHTALLY_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DEFAULT_DB_FILENAME: Final[str] = "truthtally.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self, *, create_dir: bool = True) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        if create_dir:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _xdg_data_dir() -> Path:
    base = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "truthtally"


def get_storage_config() -> StorageConfig:
    configured = env_str(DATA_DIR_ENV)
    return StorageConfig(data_dir=Path(configured) if configured else _xdg_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = env_str(DATABASE_URI_ENV)
    if uri is not None:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
