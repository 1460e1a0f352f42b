"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from truthtally.adapters.notifications import LoggingNotifier
from truthtally.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyChatUnitOfWork,
    SqlAlchemyGameUnitOfWork,
    is_started,
    startup,
)
from truthtally.config import get_settlement_config, get_thread_deletion_config
from truthtally.domain.dispatch import EventDispatcher
from truthtally.domain.errors import CallableError, InternalError
from truthtally.domain.ports.unit_of_work import ChatUnitOfWork, GameUnitOfWork
from truthtally.domain.settlement import settle_guess
from truthtally.domain.thread_deletion import delete_thread

if TYPE_CHECKING:
    from collections.abc import Mapping

    from truthtally.domain.model import LeaderboardEntry, Verdict
    from truthtally.domain.ports.notifications import Notifier
    from truthtally.domain.thread_deletion import AuthContext

GameUnitOfWorkFactory = Callable[[], GameUnitOfWork]
ChatUnitOfWorkFactory = Callable[[], ChatUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def build_dispatcher(
    *,
    notifier: Notifier | None = None,
    game_unit_of_work_factory: GameUnitOfWorkFactory | None = None,
    chat_unit_of_work_factory: ChatUnitOfWorkFactory | None = None,
) -> EventDispatcher:
    """Wire the event dispatcher to the configured store and notifier."""

    if game_unit_of_work_factory is None or chat_unit_of_work_factory is None:
        _ensure_started()
    return EventDispatcher(
        game_unit_of_work_factory=game_unit_of_work_factory or SqlAlchemyGameUnitOfWork,
        chat_unit_of_work_factory=chat_unit_of_work_factory or SqlAlchemyChatUnitOfWork,
        notifier=notifier or LoggingNotifier(),
        settlement=get_settlement_config(),
    )


def settle_stored_guess(
    guess_id: str,
    *,
    unit_of_work_factory: GameUnitOfWorkFactory | None = None,
) -> Verdict | None:
    """Re-run settlement for a guess already in the store (manual redelivery)."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyGameUnitOfWork

    with effective_uow() as uow:
        guess = uow.repositories.guesses.get(guess_id)
        if guess is None:
            log.warning("Guess %s not found", guess_id)
            return None
        snapshot: dict[str, object] = {
            "guesserUid": guess.guesser_uid,
            "targetUid": guess.target_uid,
            "guessedLieIndex": guess.guessed_lie_index,
        }

    return settle_guess(
        guess_id,
        snapshot,
        unit_of_work_factory=effective_uow,
        max_attempts=get_settlement_config().max_transaction_attempts,
    )


def delete_thread_recursive(
    data: Mapping[str, object] | None,
    auth: AuthContext | None,
    *,
    unit_of_work_factory: ChatUnitOfWorkFactory | None = None,
    page_size: int | None = None,
) -> dict[str, bool]:
    """Request handler: delete ``data["threadId"]`` and its messages for ``auth``.

    Raises a :class:`CallableError` subclass the caller can branch on; anything
    unexpected is reported as ``internal``.
    """

    thread_id = data.get("threadId") if data else None
    try:
        if unit_of_work_factory is None:
            _ensure_started()
        result = delete_thread(
            thread_id,
            auth,
            unit_of_work_factory=unit_of_work_factory or SqlAlchemyChatUnitOfWork,
            page_size=(
                page_size if page_size is not None else get_thread_deletion_config().page_size
            ),
        )
    except CallableError:
        raise
    except Exception as exc:
        log.exception("Thread deletion failed for %s", thread_id)
        raise InternalError("Thread deletion failed") from exc
    return result.to_dict()


def get_leaderboard_entry(
    uid: str,
    *,
    unit_of_work_factory: GameUnitOfWorkFactory | None = None,
) -> LeaderboardEntry | None:
    if unit_of_work_factory is None:
        _ensure_started()
    with (unit_of_work_factory or SqlAlchemyGameUnitOfWork)() as uow:
        return uow.repositories.leaderboard.get(uid)
