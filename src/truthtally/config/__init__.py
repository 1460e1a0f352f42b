"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, env_log_level, env_str
from .errors import ConfigurationError
from .logging import configure_logging
from .settlement import (
    DEFAULT_DELETE_PAGE_SIZE,
    DEFAULT_MAX_TRANSACTION_ATTEMPTS,
    MAX_BATCH_WRITES,
    SettlementConfig,
    ThreadDeletionConfig,
    get_settlement_config,
    get_thread_deletion_config,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_DELETE_PAGE_SIZE",
    "DEFAULT_MAX_TRANSACTION_ATTEMPTS",
    "MAX_BATCH_WRITES",
    "ConfigurationError",
    "DatabaseConfig",
    "SettlementConfig",
    "StorageConfig",
    "ThreadDeletionConfig",
    "configure_logging",
    "env_int",
    "env_log_level",
    "env_str",
    "get_database_config",
    "get_settlement_config",
    "get_storage_config",
    "get_thread_deletion_config",
]
