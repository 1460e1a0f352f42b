"""Server-side settlement of guesses.

Settlement is the only writer of a guess verdict. It judges the guess against the
target's private submission, stores the verdict and then hands the outcome to the
leaderboard, one participant at a time.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError

from truthtally.config.settlement import DEFAULT_MAX_TRANSACTION_ATTEMPTS
from truthtally.domain.errors import StoreError
from truthtally.domain.leaderboard import apply_leaderboard_delta
from truthtally.domain.model import LeaderboardDelta, LeaderboardSide, Verdict
from truthtally.domain.snapshots import GuessPayload
from truthtally.domain.transactions import run_transaction

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from truthtally.domain.ports.unit_of_work import GameUnitOfWork

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def parse_guess_snapshot(
    guess_id: str,
    snapshot: Mapping[str, object] | None,
) -> GuessPayload | None:
    """Validate a raw guess snapshot, returning ``None`` for unusable input."""

    if not snapshot:
        log.warning("Empty guess snapshot for %s", guess_id)
        return None
    try:
        payload = GuessPayload.model_validate(snapshot)
    except ValidationError as exc:
        log.warning(
            "Invalid guess payload %s: %s (%s errors)",
            guess_id,
            dict(snapshot),
            exc.error_count(),
        )
        return None
    if payload.guesser_uid == payload.target_uid:
        log.warning("Ignoring self-targeted guess %s by %s", guess_id, payload.guesser_uid)
        return None
    return payload


def judge_guess(
    guess_id: str,
    payload: GuessPayload,
    *,
    unit_of_work_factory: Callable[[], GameUnitOfWork],
    max_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS,
) -> Verdict:
    """Compute the verdict for ``payload`` and write it onto the stored guess."""

    def _judge(uow: GameUnitOfWork) -> Verdict:
        repositories = uow.repositories
        submission = repositories.submissions.get(payload.target_uid)
        if submission is None:
            # fail closed: no credit against a target that never committed a lie
            log.info("No private submission for target %s", payload.target_uid)
            verdict = Verdict.INCORRECT
        else:
            verdict = submission.judge(payload.guessed_lie_index)

        guess = repositories.guesses.get(guess_id)
        if guess is None:
            raise StoreError(f"Guess {guess_id} not found")
        guess.record_verdict(verdict)
        return verdict

    return run_transaction(unit_of_work_factory, _judge, max_attempts=max_attempts)


def settle_guess(
    guess_id: str,
    snapshot: Mapping[str, object] | None,
    *,
    unit_of_work_factory: Callable[[], GameUnitOfWork],
    max_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS,
    clock: Callable[[], datetime] = _utcnow,
) -> Verdict | None:
    """Settle a newly created guess and update both leaderboard entries.

    Returns the verdict, or ``None`` when the snapshot was dropped or any store
    operation failed. Failures are logged and never raised; redelivery is up to the
    event source.
    """

    payload = parse_guess_snapshot(guess_id, snapshot)
    if payload is None:
        return None

    try:
        verdict = judge_guess(
            guess_id,
            payload,
            unit_of_work_factory=unit_of_work_factory,
            max_attempts=max_attempts,
        )
        participants = (
            (LeaderboardSide.GUESSER, payload.guesser_uid),
            (LeaderboardSide.TARGET, payload.target_uid),
        )
        for side, uid in participants:
            apply_leaderboard_delta(
                uid,
                LeaderboardDelta.for_side(side, verdict),
                guess_id=guess_id,
                side=side,
                unit_of_work_factory=unit_of_work_factory,
                max_attempts=max_attempts,
                clock=clock,
            )
    except Exception:
        log.exception("Error processing guess %s", guess_id)
        return None

    log.info(
        "Guess processed: guesser=%s, target=%s, verdict=%s",
        payload.guesser_uid,
        payload.target_uid,
        verdict,
    )
    return verdict


__all__ = ["judge_guess", "parse_guess_snapshot", "settle_guess"]
