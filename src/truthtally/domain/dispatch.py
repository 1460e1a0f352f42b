"""Routing of change-feed document events to settlement and notification intents.

The surrounding trigger runtime calls :meth:`EventDispatcher.on_created` and
:meth:`EventDispatcher.on_updated` with the document path and its snapshots.
Delivery is at least once and unordered across documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError

from truthtally.config.settlement import SettlementConfig
from truthtally.domain.model import CallStatus
from truthtally.domain.ports.notifications import NotificationIntent, NotificationKind
from truthtally.domain.settlement import settle_guess
from truthtally.domain.snapshots import CallPayload, MessagePayload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from truthtally.domain.ports.notifications import Notifier
    from truthtally.domain.ports.unit_of_work import ChatUnitOfWork, GameUnitOfWork

    type Snapshot = Mapping[str, object] | None
    type CreatedHandler = Callable[[dict[str, str], Snapshot], None]
    type UpdatedHandler = Callable[[dict[str, str], Snapshot, Snapshot], None]

log = logging.getLogger(__name__)

GUESS_PATH = "games/two_truths_one_lie/guesses/{guessId}"
CALL_PATH = "calls/{callId}"
MESSAGE_PATH = "threads/{threadId}/messages/{messageId}"
FRIEND_REQUEST_PATH = "users/{userId}/incoming/{fromUid}"
FRIEND_PATH = "users/{userId}/friends/{friendUid}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class DocumentRoute:
    """A document path template such as ``calls/{callId}``."""

    template: str

    def match(self, path: str) -> dict[str, str] | None:
        expected = self.template.strip("/").split("/")
        actual = path.strip("/").split("/")
        if len(expected) != len(actual):
            return None
        params: dict[str, str] = {}
        for pattern, segment in zip(expected, actual, strict=True):
            if pattern.startswith("{") and pattern.endswith("}"):
                if not segment:
                    return None
                params[pattern[1:-1]] = segment
            elif pattern != segment:
                return None
        return params


class EventDispatcher:
    """Entry point for created/updated document events."""

    def __init__(
        self,
        *,
        game_unit_of_work_factory: Callable[[], GameUnitOfWork],
        chat_unit_of_work_factory: Callable[[], ChatUnitOfWork],
        notifier: Notifier | None = None,
        settlement: SettlementConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._game_uow = game_unit_of_work_factory
        self._chat_uow = chat_unit_of_work_factory
        self._notifier = notifier
        self._settlement = settlement or SettlementConfig()
        self._clock = clock
        self._created: list[tuple[DocumentRoute, CreatedHandler]] = [
            (DocumentRoute(GUESS_PATH), self._guess_created),
            (DocumentRoute(CALL_PATH), self._call_created),
            (DocumentRoute(MESSAGE_PATH), self._message_created),
            (DocumentRoute(FRIEND_REQUEST_PATH), self._friend_request_created),
            (DocumentRoute(FRIEND_PATH), self._friend_added),
        ]
        self._updated: list[tuple[DocumentRoute, UpdatedHandler]] = [
            (DocumentRoute(CALL_PATH), self._call_updated),
        ]

    def on_created(self, path: str, snapshot: Snapshot) -> bool:
        """Handle a document creation; returns whether any route matched."""

        for route, handler in self._created:
            params = route.match(path)
            if params is not None:
                handler(params, snapshot)
                return True
        log.debug("No created-handler for %s", path)
        return False

    def on_updated(self, path: str, before: Snapshot, after: Snapshot) -> bool:
        """Handle a document update; returns whether any route matched."""

        for route, handler in self._updated:
            params = route.match(path)
            if params is not None:
                handler(params, before, after)
                return True
        log.debug("No updated-handler for %s", path)
        return False

    # Settlement ------------------------------------------------------------------

    def _guess_created(self, params: dict[str, str], snapshot: Snapshot) -> None:
        settle_guess(
            params["guessId"],
            snapshot,
            unit_of_work_factory=self._game_uow,
            max_attempts=self._settlement.max_transaction_attempts,
            clock=self._clock,
        )

    # Notifications ---------------------------------------------------------------

    def _call_created(self, params: dict[str, str], snapshot: Snapshot) -> None:
        call = _parse_call(snapshot)
        if call is None or call.status != CallStatus.RINGING or not call.callee_uid:
            return
        self._notify(
            NotificationIntent(
                kind=NotificationKind.INCOMING_CALL,
                recipient_uid=call.callee_uid,
                sender_uid=call.caller_uid,
                data={"callId": params["callId"]},
            )
        )

    def _call_updated(self, params: dict[str, str], before: Snapshot, after: Snapshot) -> None:
        previous = _parse_call(before)
        current = _parse_call(after)
        if previous is None or current is None:
            return
        if previous.status != CallStatus.RINGING or current.status == CallStatus.RINGING:
            return
        if not current.callee_uid:
            return
        self._notify(
            NotificationIntent(
                kind=NotificationKind.CALL_ENDED,
                recipient_uid=current.callee_uid,
                data={"callId": params["callId"], "status": current.status or ""},
            )
        )

    def _message_created(self, params: dict[str, str], snapshot: Snapshot) -> None:
        if not snapshot:
            return
        try:
            message = MessagePayload.model_validate(snapshot)
        except ValidationError:
            log.warning("Invalid message payload in thread %s", params["threadId"])
            return
        try:
            with self._chat_uow() as uow:
                thread = uow.repositories.threads.get(params["threadId"])
        except Exception:
            log.exception("Could not load thread %s for notification", params["threadId"])
            return
        if thread is None:
            return
        self._notify(
            NotificationIntent(
                kind=NotificationKind.NEW_MESSAGE,
                recipient_uid=thread.other_member(message.from_uid),
                sender_uid=message.from_uid,
                data={"threadId": thread.id, "messageType": message.type},
            )
        )

    def _friend_request_created(self, params: dict[str, str], snapshot: Snapshot) -> None:
        _ = snapshot
        self._notify(
            NotificationIntent(
                kind=NotificationKind.FRIEND_REQUEST,
                recipient_uid=params["userId"],
                sender_uid=params["fromUid"],
            )
        )

    def _friend_added(self, params: dict[str, str], snapshot: Snapshot) -> None:
        # userId accepted; tell the original requester
        _ = snapshot
        self._notify(
            NotificationIntent(
                kind=NotificationKind.FRIEND_ACCEPTED,
                recipient_uid=params["friendUid"],
                sender_uid=params["userId"],
            )
        )

    def _notify(self, intent: NotificationIntent) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(intent)
        except Exception:
            log.exception("Error sending %s notification to %s", intent.kind, intent.recipient_uid)


def _parse_call(snapshot: Snapshot) -> CallPayload | None:
    if not snapshot:
        return None
    try:
        return CallPayload.model_validate(snapshot)
    except ValidationError:
        log.warning("Invalid call payload: %s", dict(snapshot))
        return None


__all__ = [
    "CALL_PATH",
    "FRIEND_PATH",
    "FRIEND_REQUEST_PATH",
    "GUESS_PATH",
    "MESSAGE_PATH",
    "DocumentRoute",
    "EventDispatcher",
]
