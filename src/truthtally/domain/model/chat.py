"""Chat threads and their messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Thread:
    """A conversation between exactly two members."""

    id: str
    user_a_uid: str
    user_b_uid: str
    created_at: datetime | None = None

    @property
    def member_uids(self) -> tuple[str, str]:
        return (self.user_a_uid, self.user_b_uid)

    def is_member(self, uid: str) -> bool:
        return uid in self.member_uids

    def other_member(self, uid: str) -> str:
        return self.user_b_uid if uid == self.user_a_uid else self.user_a_uid


@dataclass(eq=False, kw_only=True)
class Message:
    id: str
    thread_id: str
    from_uid: str
    text: str = ""
    type: str = "text"
    created_at: datetime | None = None
