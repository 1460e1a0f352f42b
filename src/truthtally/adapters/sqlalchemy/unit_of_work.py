"""SQLAlchemy-backed units of work for settlement and chat threads.

The adapter keeps one module-level engine. ``startup()`` must run before any unit of
work is created; tests call it with their own engine and ``force=True``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from truthtally.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from truthtally.adapters.sqlalchemy.repositories import (
    SqlAlchemyGuessRepository,
    SqlAlchemyLeaderboardRepository,
    SqlAlchemyMessageRepository,
    SqlAlchemySettledEffectRepository,
    SqlAlchemySubmissionRepository,
    SqlAlchemyThreadRepository,
)
from truthtally.config import get_database_config
from truthtally.domain.errors import StoreError, TransactionConflictError
from truthtally.domain.ports.unit_of_work import (
    ChatRepositories,
    GameRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup()`` or configured twice."""


class _AdapterState:
    def __init__(self) -> None:
        self.engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    def configure(self, engine: Engine) -> None:
        self.engine = engine
        # detached entities stay readable after commit
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def reset(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._sessions = None

    def new_session(self) -> Session:
        if self._sessions is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised; call "
                "truthtally.adapters.sqlalchemy.startup() first"
            )
        return self._sessions()


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create the engine if needed, map the model and create missing tables."""

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already initialised; pass force=True")

    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    create_all_tables(engine)
    _STATE.configure(engine)
    log.debug("SQLAlchemy adapter bound to %s", engine.url.render_as_string())


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it."""

    _STATE.reset()


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; nothing is written without ``commit()``."""

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("SQLAlchemy adapter not initialised")
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = _STATE.new_session()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with-block")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside its with-block")
        return self._repositories

    def commit(self) -> None:
        session = self.session
        try:
            session.commit()
        except (StaleDataError, IntegrityError) as exc:
            # a concurrent writer bumped a version or inserted the same key first
            session.rollback()
            log.debug("Commit conflicted: %s", exc)
            raise TransactionConflictError(str(exc)) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyGameUnitOfWork(BaseSqlAlchemyUnitOfWork[GameRepositories]):
    """Guesses, private submissions, leaderboard entries and settled-effect markers."""

    def _build_repositories(self, session: Session) -> GameRepositories:
        return GameRepositories(
            guesses=SqlAlchemyGuessRepository(session),
            submissions=SqlAlchemySubmissionRepository(session),
            leaderboard=SqlAlchemyLeaderboardRepository(session),
            settled_effects=SqlAlchemySettledEffectRepository(session),
        )


class SqlAlchemyChatUnitOfWork(BaseSqlAlchemyUnitOfWork[ChatRepositories]):
    """Threads and their messages."""

    def _build_repositories(self, session: Session) -> ChatRepositories:
        return ChatRepositories(
            threads=SqlAlchemyThreadRepository(session),
            messages=SqlAlchemyMessageRepository(session),
        )


if TYPE_CHECKING:
    from truthtally.domain.ports.unit_of_work import ChatUnitOfWork, GameUnitOfWork

    _uow_game_check: GameUnitOfWork = SqlAlchemyGameUnitOfWork()
    _uow_chat_check: ChatUnitOfWork = SqlAlchemyChatUnitOfWork()
