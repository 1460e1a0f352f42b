"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from truthtally.domain.ports.persistence import (
        GuessRepository,
        LeaderboardRepository,
        MessageRepository,
        SettledEffectRepository,
        SubmissionRepository,
        ThreadRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    ``commit`` raises :class:`~truthtally.domain.errors.TransactionConflictError` when
    data read inside the unit of work was modified concurrently.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class GameRepositories(RepositoryCollection):
    """Repositories required to settle guesses."""

    guesses: GuessRepository
    submissions: SubmissionRepository
    leaderboard: LeaderboardRepository
    settled_effects: SettledEffectRepository


@dataclass(slots=True)
class ChatRepositories(RepositoryCollection):
    """Repositories required to read and drain chat threads."""

    threads: ThreadRepository
    messages: MessageRepository


type GameUnitOfWork = UnitOfWork[GameRepositories]
type ChatUnitOfWork = UnitOfWork[ChatRepositories]
