"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select

from truthtally.adapters.sqlalchemy.mappings import message_table
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

    from sqlalchemy.orm import Session


class SqlAlchemyKeyedRepository[TEntity]:
    """Shared helpers for records addressed by a single primary key."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, key: str) -> TEntity | None:
        return self.session.get(self._entity_cls, key)


class SqlAlchemyGuessRepository(SqlAlchemyKeyedRepository[Guess]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Guess)


class SqlAlchemySubmissionRepository(SqlAlchemyKeyedRepository[PrivateSubmission]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, PrivateSubmission)


class SqlAlchemyLeaderboardRepository(SqlAlchemyKeyedRepository[LeaderboardEntry]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, LeaderboardEntry)


class SqlAlchemyThreadRepository(SqlAlchemyKeyedRepository[Thread]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Thread)

    def remove(self, entity: Thread) -> None:
        self.session.delete(entity)


class SqlAlchemySettledEffectRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: SettledEffect) -> None:
        self.session.add(entity)

    def exists(self, *, guess_id: str, side: LeaderboardSide) -> bool:
        return self.session.get(SettledEffect, (guess_id, side)) is not None


class SqlAlchemyMessageRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Message) -> None:
        self.session.add(entity)

    def list_page(self, thread_id: str, *, limit: int) -> Sequence[Message]:
        stmt = (
            select(Message)
            .where(message_table.c.thread_id == thread_id)
            .order_by(message_table.c.id)
            .limit(limit)
        )
        return self.session.execute(stmt).scalars().all()

    def remove_batch(self, messages: Sequence[Message]) -> None:
        for message in messages:
            self.session.delete(message)

    def count(self, thread_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(message_table)
            .where(message_table.c.thread_id == thread_id)
        )
        return self.session.execute(stmt).scalar_one()


if TYPE_CHECKING:
    from truthtally.domain.ports.persistence import (
        GuessRepository,
        LeaderboardRepository,
        MessageRepository,
        SettledEffectRepository,
        SubmissionRepository,
        ThreadRepository,
    )

    _session_stub = cast("Session", object())
    _guess_repo: GuessRepository = SqlAlchemyGuessRepository(_session_stub)
    _submission_repo: SubmissionRepository = SqlAlchemySubmissionRepository(_session_stub)
    _leaderboard_repo: LeaderboardRepository = SqlAlchemyLeaderboardRepository(_session_stub)
    _effect_repo: SettledEffectRepository = SqlAlchemySettledEffectRepository(_session_stub)
    _thread_repo: ThreadRepository = SqlAlchemyThreadRepository(_session_stub)
    _message_repo: MessageRepository = SqlAlchemyMessageRepository(_session_stub)
