"""Limits for settlement transactions and thread deletion."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int

DEFAULT_MAX_TRANSACTION_ATTEMPTS = 5
DEFAULT_DELETE_PAGE_SIZE = 500
# Hard per-batch write limit of the store.
MAX_BATCH_WRITES = 500


@dataclass(frozen=True, slots=True)
class SettlementConfig:
    max_transaction_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS


@dataclass(frozen=True, slots=True)
class ThreadDeletionConfig:
    page_size: int = DEFAULT_DELETE_PAGE_SIZE


def get_settlement_config() -> SettlementConfig:
    return SettlementConfig(
        max_transaction_attempts=env_int(
            "TRUTHTALLY_MAX_TRANSACTION_ATTEMPTS",
            DEFAULT_MAX_TRANSACTION_ATTEMPTS,
        )
    )


def get_thread_deletion_config() -> ThreadDeletionConfig:
    return ThreadDeletionConfig(
        page_size=env_int(
            "TRUTHTALLY_DELETE_PAGE_SIZE",
            DEFAULT_DELETE_PAGE_SIZE,
            maximum=MAX_BATCH_WRITES,
        )
    )
