from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from truthtally.domain.errors import TransactionRetryLimitError
from truthtally.domain.model import LeaderboardEntry
from truthtally.domain.transactions import run_transaction
from tests.helpers.game_store import FakeGameUnitOfWork, InMemoryGameStore

if TYPE_CHECKING:
    from collections.abc import Callable


def _bump(uid: str) -> Callable[[FakeGameUnitOfWork], int]:
    def work(uow: FakeGameUnitOfWork) -> int:
        entry = uow.repositories.leaderboard.get(uid)
        if entry is None:
            entry = LeaderboardEntry(uid=uid)
            uow.repositories.leaderboard.add(entry)
        entry.total_guesses += 1
        return entry.total_guesses

    return work


def test_run_transaction_commits_once_without_conflicts() -> None:
    store = InMemoryGameStore()

    result = run_transaction(store.unit_of_work, _bump("alice"))

    assert result == 1
    assert store.commits == 1
    assert store.conflicts == 0


def test_run_transaction_retries_against_fresh_state() -> None:
    store = InMemoryGameStore()
    run_transaction(store.unit_of_work, _bump("alice"))
    store.interlopers.append(lambda: run_transaction(store.unit_of_work, _bump("alice")))

    result = run_transaction(store.unit_of_work, _bump("alice"))

    assert store.conflicts == 1
    assert result == 3
    entry = store.entry("alice")
    assert entry is not None
    assert entry.total_guesses == 3


def test_run_transaction_gives_up_after_max_attempts() -> None:
    store = InMemoryGameStore()
    run_transaction(store.unit_of_work, _bump("alice"))

    def interfere() -> None:
        run_transaction(store.unit_of_work, _bump("alice"))

    # every attempt of the outer transaction loses against one interloper
    store.interlopers.extend([interfere, lambda: None] * 3)

    with pytest.raises(TransactionRetryLimitError) as excinfo:
        run_transaction(store.unit_of_work, _bump("alice"), max_attempts=3)

    assert excinfo.value.attempts == 3


def test_run_transaction_rejects_non_positive_attempts() -> None:
    store = InMemoryGameStore()

    with pytest.raises(ValueError, match="at least 1"):
        run_transaction(store.unit_of_work, _bump("alice"), max_attempts=0)
