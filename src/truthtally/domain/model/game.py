"""Two truths and one lie: guesses, private submissions and leaderboard counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from truthtally.domain.model.enums import LeaderboardSide, Verdict

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Guess:
    """One guesser's claim about which of a target's statements is the lie.

    ``is_correct`` stays ``None`` until settlement writes the server-side verdict.
    """

    id: str
    guesser_uid: str
    target_uid: str
    guessed_lie_index: int
    is_correct: bool | None = None
    created_at: datetime | None = None

    @property
    def verdict(self) -> Verdict:
        return Verdict.from_flag(self.is_correct)

    def record_verdict(self, verdict: Verdict) -> None:
        if verdict is Verdict.UNSET:
            raise ValueError("Cannot record an unset verdict")
        self.is_correct = verdict is Verdict.CORRECT


@dataclass(eq=False, kw_only=True)
class PrivateSubmission:
    """The target's hidden answer; read-only for settlement."""

    uid: str
    lie_index: int
    submitted_at: datetime | None = None

    def judge(self, guessed_lie_index: int) -> Verdict:
        if self.lie_index == guessed_lie_index:
            return Verdict.CORRECT
        return Verdict.INCORRECT


@dataclass(frozen=True, slots=True)
class LeaderboardDelta:
    """Non-negative increments for the four leaderboard counters."""

    correct_guesses: int = 0
    total_guesses: int = 0
    people_fooled: int = 0
    times_guessed_on: int = 0

    def __post_init__(self) -> None:
        for name in ("correct_guesses", "total_guesses", "people_fooled", "times_guessed_on"):
            if getattr(self, name) < 0:
                raise ValueError(f"Leaderboard counters only increase; {name} is negative")

    @classmethod
    def for_guesser(cls, verdict: Verdict) -> LeaderboardDelta:
        _require_settled(verdict)
        return cls(total_guesses=1, correct_guesses=1 if verdict is Verdict.CORRECT else 0)

    @classmethod
    def for_target(cls, verdict: Verdict) -> LeaderboardDelta:
        # the target fools the guesser whenever the guess is wrong
        _require_settled(verdict)
        return cls(times_guessed_on=1, people_fooled=1 if verdict is Verdict.INCORRECT else 0)

    @classmethod
    def for_side(cls, side: LeaderboardSide, verdict: Verdict) -> LeaderboardDelta:
        if side is LeaderboardSide.GUESSER:
            return cls.for_guesser(verdict)
        return cls.for_target(verdict)


def _require_settled(verdict: Verdict) -> None:
    if verdict is Verdict.UNSET:
        raise ValueError("Leaderboard deltas need a settled verdict")


@dataclass(eq=False, kw_only=True)
class LeaderboardEntry:
    """Per-participant counters; a missing entry reads as all zeroes."""

    uid: str
    correct_guesses: int = 0
    total_guesses: int = 0
    people_fooled: int = 0
    times_guessed_on: int = 0
    updated_at: datetime | None = None

    def apply(self, delta: LeaderboardDelta, *, at: datetime) -> None:
        self.correct_guesses = (self.correct_guesses or 0) + delta.correct_guesses
        self.total_guesses = (self.total_guesses or 0) + delta.total_guesses
        self.people_fooled = (self.people_fooled or 0) + delta.people_fooled
        self.times_guessed_on = (self.times_guessed_on or 0) + delta.times_guessed_on
        self.updated_at = at


@dataclass(eq=False, kw_only=True)
class SettledEffect:
    """Marker proving that one side of a guess has been counted."""

    guess_id: str
    side: LeaderboardSide
    uid: str
    applied_at: datetime | None = field(default=None)
