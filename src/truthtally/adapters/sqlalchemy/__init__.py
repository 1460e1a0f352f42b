"""SQLAlchemy adapter package for truthtally."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyGuessRepository,
    SqlAlchemyLeaderboardRepository,
    SqlAlchemyMessageRepository,
    SqlAlchemySettledEffectRepository,
    SqlAlchemySubmissionRepository,
    SqlAlchemyThreadRepository,
)
from .unit_of_work import (
    SqlAlchemyChatUnitOfWork,
    SqlAlchemyGameUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyChatUnitOfWork",
    "SqlAlchemyGameUnitOfWork",
    "SqlAlchemyGuessRepository",
    "SqlAlchemyLeaderboardRepository",
    "SqlAlchemyMessageRepository",
    "SqlAlchemySettledEffectRepository",
    "SqlAlchemySubmissionRepository",
    "SqlAlchemyThreadRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "startup",
]
