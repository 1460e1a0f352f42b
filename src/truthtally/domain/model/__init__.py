"""Domain model for guesses, leaderboards and chat threads."""

from __future__ import annotations

from .chat import Message, Thread
from .enums import CallStatus, LeaderboardSide, Verdict
from .game import Guess, LeaderboardDelta, LeaderboardEntry, PrivateSubmission, SettledEffect

__all__ = [
    "CallStatus",
    "Guess",
    "LeaderboardDelta",
    "LeaderboardEntry",
    "LeaderboardSide",
    "Message",
    "PrivateSubmission",
    "SettledEffect",
    "Thread",
    "Verdict",
]
