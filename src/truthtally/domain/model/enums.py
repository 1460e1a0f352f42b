"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Verdict(StrEnum):
    """Tri-state correctness of a guess."""

    UNSET = "unset"
    CORRECT = "correct"
    INCORRECT = "incorrect"

    @classmethod
    def from_flag(cls, is_correct: bool | None) -> Verdict:  # noqa: FBT001
        if is_correct is None:
            return cls.UNSET
        return cls.CORRECT if is_correct else cls.INCORRECT


class LeaderboardSide(StrEnum):
    """Which participant of a guess a leaderboard update belongs to."""

    GUESSER = "guesser"
    TARGET = "target"


class CallStatus(StrEnum):
    RINGING = "ringing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ENDED = "ended"
    MISSED = "missed"
