"""Leaderboard aggregation: one optimistic transaction per participant update.

The guesser and target updates of a guess are deliberately separate transactions.
If the process dies between the two, only the guesser side is counted. The
``SettledEffect`` marker written with each update lets a redelivered guess apply
the missing side without counting the other one twice.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from truthtally.config.settlement import DEFAULT_MAX_TRANSACTION_ATTEMPTS
from truthtally.domain.model import LeaderboardEntry, SettledEffect
from truthtally.domain.transactions import run_transaction

if TYPE_CHECKING:
    from collections.abc import Callable

    from truthtally.domain.model import LeaderboardDelta, LeaderboardSide
    from truthtally.domain.ports.unit_of_work import GameUnitOfWork

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def apply_leaderboard_delta(
    uid: str,
    delta: LeaderboardDelta,
    *,
    guess_id: str,
    side: LeaderboardSide,
    unit_of_work_factory: Callable[[], GameUnitOfWork],
    max_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS,
    clock: Callable[[], datetime] = _utcnow,
) -> bool:
    """Add ``delta`` to the entry of ``uid`` unless this guess side was already counted.

    Returns ``True`` when the delta was applied and ``False`` for a duplicate.
    """

    def _apply(uow: GameUnitOfWork) -> bool:
        repositories = uow.repositories
        if repositories.settled_effects.exists(guess_id=guess_id, side=side):
            return False

        entry = repositories.leaderboard.get(uid)
        if entry is None:
            entry = LeaderboardEntry(uid=uid)
            repositories.leaderboard.add(entry)

        now = clock()
        entry.apply(delta, at=now)
        repositories.settled_effects.add(
            SettledEffect(guess_id=guess_id, side=side, uid=uid, applied_at=now)
        )
        return True

    applied = run_transaction(unit_of_work_factory, _apply, max_attempts=max_attempts)
    if applied:
        log.debug("Applied %s delta for guess %s to %s: %s", side, guess_id, uid, delta)
    else:
        log.info("Skipping already counted %s side of guess %s", side, guess_id)
    return applied


__all__ = ["apply_leaderboard_delta"]
