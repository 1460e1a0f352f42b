"""Port towards the push-notification collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable


class NotificationKind(StrEnum):
    INCOMING_CALL = "incoming_call"
    CALL_ENDED = "call_ended"
    NEW_MESSAGE = "new_message"
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPTED = "friend_accepted"


@dataclass(frozen=True, slots=True)
class NotificationIntent:
    """What should be pushed to whom; rendering and delivery happen elsewhere."""

    kind: NotificationKind
    recipient_uid: str
    sender_uid: str | None = None
    data: dict[str, str] = field(default_factory=dict[str, str])


@runtime_checkable
class Notifier(Protocol):
    def notify(self, intent: NotificationIntent) -> None: ...
