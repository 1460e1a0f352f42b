from __future__ import annotations

from datetime import UTC, datetime

import pytest

from truthtally.domain.model import (
    Guess,
    LeaderboardDelta,
    LeaderboardEntry,
    LeaderboardSide,
    PrivateSubmission,
    Thread,
    Verdict,
)


def test_guess_verdict_starts_unset() -> None:
    guess = Guess(id="g", guesser_uid="a", target_uid="b", guessed_lie_index=0)

    assert guess.verdict is Verdict.UNSET


def test_record_verdict_overwrites_client_value() -> None:
    guess = Guess(id="g", guesser_uid="a", target_uid="b", guessed_lie_index=0, is_correct=True)

    guess.record_verdict(Verdict.INCORRECT)

    assert guess.is_correct is False
    assert guess.verdict is Verdict.INCORRECT


def test_record_verdict_rejects_unset() -> None:
    guess = Guess(id="g", guesser_uid="a", target_uid="b", guessed_lie_index=0)

    with pytest.raises(ValueError, match="unset"):
        guess.record_verdict(Verdict.UNSET)


def test_private_submission_judges_by_lie_index() -> None:
    submission = PrivateSubmission(uid="b", lie_index=1)

    assert submission.judge(1) is Verdict.CORRECT
    assert submission.judge(2) is Verdict.INCORRECT


@pytest.mark.parametrize(
    ("verdict", "expected"),
    [
        (Verdict.CORRECT, LeaderboardDelta(correct_guesses=1, total_guesses=1)),
        (Verdict.INCORRECT, LeaderboardDelta(total_guesses=1)),
    ],
)
def test_guesser_delta(verdict: Verdict, expected: LeaderboardDelta) -> None:
    assert LeaderboardDelta.for_guesser(verdict) == expected


@pytest.mark.parametrize(
    ("verdict", "expected"),
    [
        (Verdict.CORRECT, LeaderboardDelta(times_guessed_on=1)),
        (Verdict.INCORRECT, LeaderboardDelta(people_fooled=1, times_guessed_on=1)),
    ],
)
def test_target_delta(verdict: Verdict, expected: LeaderboardDelta) -> None:
    assert LeaderboardDelta.for_side(LeaderboardSide.TARGET, verdict) == expected


def test_delta_requires_settled_verdict() -> None:
    with pytest.raises(ValueError, match="settled verdict"):
        LeaderboardDelta.for_guesser(Verdict.UNSET)


def test_delta_rejects_negative_counters() -> None:
    with pytest.raises(ValueError, match="only increase"):
        LeaderboardDelta(total_guesses=-1)


def test_entry_apply_adds_to_current_values_and_stamps() -> None:
    entry = LeaderboardEntry(uid="a", correct_guesses=2, total_guesses=5)
    at = datetime(2025, 1, 1, tzinfo=UTC)

    entry.apply(LeaderboardDelta(correct_guesses=1, total_guesses=1), at=at)

    assert (entry.correct_guesses, entry.total_guesses) == (3, 6)
    assert (entry.people_fooled, entry.times_guessed_on) == (0, 0)
    assert entry.updated_at == at


def test_thread_membership() -> None:
    thread = Thread(id="t", user_a_uid="alice", user_b_uid="bob")

    assert thread.is_member("alice")
    assert thread.is_member("bob")
    assert not thread.is_member("mallory")
    assert thread.other_member("alice") == "bob"
    assert thread.other_member("bob") == "alice"
