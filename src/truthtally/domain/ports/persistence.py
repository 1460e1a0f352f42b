"""Ports for persisting domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from truthtally.domain.model import (
    Guess,
    LeaderboardEntry,
    LeaderboardSide,
    Message,
    PrivateSubmission,
    SettledEffect,
    Thread,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent record store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class KeyedRepository[TEntity](Repository[TEntity], Protocol):
    """Repository addressing records by their document key."""

    def get(self, key: str) -> TEntity | None: ...


@runtime_checkable
class GuessRepository(KeyedRepository[Guess], Protocol):
    """Persistence contract for guesses (keyed by guess id)."""


@runtime_checkable
class SubmissionRepository(KeyedRepository[PrivateSubmission], Protocol):
    """Persistence contract for private submissions (keyed by target uid)."""


@runtime_checkable
class LeaderboardRepository(KeyedRepository[LeaderboardEntry], Protocol):
    """Persistence contract for leaderboard entries (keyed by participant uid)."""


@runtime_checkable
class SettledEffectRepository(Repository[SettledEffect], Protocol):
    """Persistence contract for processed-guess markers."""

    def exists(self, *, guess_id: str, side: LeaderboardSide) -> bool: ...


@runtime_checkable
class ThreadRepository(KeyedRepository[Thread], Protocol):
    """Persistence contract for chat threads."""

    def remove(self, entity: Thread) -> None: ...


@runtime_checkable
class MessageRepository(Repository[Message], Protocol):
    """Persistence contract for the messages of a thread."""

    def list_page(self, thread_id: str, *, limit: int) -> Sequence[Message]:
        """Return up to ``limit`` remaining messages ordered by message id."""
        ...

    def remove_batch(self, messages: Sequence[Message]) -> None: ...

    def count(self, thread_id: str) -> int: ...
