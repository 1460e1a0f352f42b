"""Domain port definitions for adapters."""

from __future__ import annotations

from .notifications import NotificationIntent, NotificationKind, Notifier
from .persistence import (
    GuessRepository,
    KeyedRepository,
    LeaderboardRepository,
    MessageRepository,
    Repository,
    SettledEffectRepository,
    SubmissionRepository,
    ThreadRepository,
)
from .unit_of_work import (
    ChatRepositories,
    ChatUnitOfWork,
    GameRepositories,
    GameUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ChatRepositories",
    "ChatUnitOfWork",
    "GameRepositories",
    "GameUnitOfWork",
    "GuessRepository",
    "KeyedRepository",
    "LeaderboardRepository",
    "MessageRepository",
    "NotificationIntent",
    "NotificationKind",
    "Notifier",
    "Repository",
    "RepositoryCollection",
    "SettledEffectRepository",
    "SubmissionRepository",
    "ThreadRepository",
    "UnitOfWork",
]
