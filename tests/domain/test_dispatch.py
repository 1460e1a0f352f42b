from __future__ import annotations

import pytest

from truthtally.config import SettlementConfig
from truthtally.domain.dispatch import DocumentRoute, EventDispatcher
from truthtally.domain.model import Verdict
from truthtally.domain.ports.notifications import NotificationIntent, NotificationKind
from tests.helpers.chat_store import InMemoryChatStore
from tests.helpers.game_store import InMemoryGameStore, guess_snapshot, make_guess


class RecordingNotifier:
    def __init__(self) -> None:
        self.intents: list[NotificationIntent] = []

    def notify(self, intent: NotificationIntent) -> None:
        self.intents.append(intent)


class FailingNotifier:
    def notify(self, intent: NotificationIntent) -> None:
        raise RuntimeError(f"push service down for {intent.recipient_uid}")


@pytest.fixture
def game_store() -> InMemoryGameStore:
    return InMemoryGameStore()


@pytest.fixture
def chat_store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def dispatcher(
    game_store: InMemoryGameStore,
    chat_store: InMemoryChatStore,
    notifier: RecordingNotifier,
) -> EventDispatcher:
    return EventDispatcher(
        game_unit_of_work_factory=game_store.unit_of_work,
        chat_unit_of_work_factory=chat_store.unit_of_work,
        notifier=notifier,
        settlement=SettlementConfig(max_transaction_attempts=3),
    )


def test_document_route_extracts_parameters() -> None:
    route = DocumentRoute("threads/{threadId}/messages/{messageId}")

    assert route.match("threads/t1/messages/m1") == {"threadId": "t1", "messageId": "m1"}
    assert route.match("/threads/t1/messages/m1/") == {"threadId": "t1", "messageId": "m1"}
    assert route.match("threads/t1") is None
    assert route.match("calls/t1/messages/m1") is None
    assert route.match("threads//messages/m1") is None


def test_guess_creation_is_settled(
    dispatcher: EventDispatcher,
    game_store: InMemoryGameStore,
) -> None:
    guess = make_guess("g1", guesser="A", target="B", index=2)
    game_store.add_guess(guess)
    game_store.add_submission("B", lie_index=1)

    routed = dispatcher.on_created("games/two_truths_one_lie/guesses/g1", guess_snapshot(guess))

    assert routed is True
    assert game_store.guesses["g1"].verdict is Verdict.INCORRECT
    entry = game_store.entry("B")
    assert entry is not None
    assert entry.people_fooled == 1


def test_unrouted_paths_are_ignored(dispatcher: EventDispatcher) -> None:
    assert dispatcher.on_created("games/other/guesses/g1", {"x": 1}) is False
    assert dispatcher.on_updated("threads/t1", {}, {}) is False


def test_ringing_call_notifies_callee(
    dispatcher: EventDispatcher,
    notifier: RecordingNotifier,
) -> None:
    dispatcher.on_created(
        "calls/c1",
        {"callerUid": "alice", "calleeUid": "bob", "status": "ringing"},
    )

    assert notifier.intents == [
        NotificationIntent(
            kind=NotificationKind.INCOMING_CALL,
            recipient_uid="bob",
            sender_uid="alice",
            data={"callId": "c1"},
        )
    ]


def test_non_ringing_call_creation_is_silent(
    dispatcher: EventDispatcher,
    notifier: RecordingNotifier,
) -> None:
    dispatcher.on_created("calls/c1", {"callerUid": "alice", "calleeUid": "bob", "status": "ended"})

    assert notifier.intents == []


def test_call_leaving_ringing_notifies_call_ended(
    dispatcher: EventDispatcher,
    notifier: RecordingNotifier,
) -> None:
    before = {"callerUid": "alice", "calleeUid": "bob", "status": "ringing"}
    after = {"callerUid": "alice", "calleeUid": "bob", "status": "rejected"}

    assert dispatcher.on_updated("calls/c1", before, after) is True

    assert [intent.kind for intent in notifier.intents] == [NotificationKind.CALL_ENDED]
    assert notifier.intents[0].data == {"callId": "c1", "status": "rejected"}


def test_call_update_without_status_transition_is_silent(
    dispatcher: EventDispatcher,
    notifier: RecordingNotifier,
) -> None:
    ringing = {"callerUid": "alice", "calleeUid": "bob", "status": "ringing"}
    ended = {"callerUid": "alice", "calleeUid": "bob", "status": "ended"}

    dispatcher.on_updated("calls/c1", ringing, ringing)
    dispatcher.on_updated("calls/c1", ended, {"status": "missed", "calleeUid": "bob"})

    assert notifier.intents == []


def test_new_message_notifies_other_member(
    dispatcher: EventDispatcher,
    chat_store: InMemoryChatStore,
    notifier: RecordingNotifier,
) -> None:
    chat_store.add_thread("t1", members=("alice", "bob"))

    dispatcher.on_created("threads/t1/messages/m1", {"fromUid": "bob", "type": "image"})

    assert notifier.intents == [
        NotificationIntent(
            kind=NotificationKind.NEW_MESSAGE,
            recipient_uid="alice",
            sender_uid="bob",
            data={"threadId": "t1", "messageType": "image"},
        )
    ]


@pytest.mark.parametrize(
    ("snapshot", "message_type"),
    [
        ({"fromUid": "alice", "text": None, "type": "image"}, "image"),
        ({"fromUid": "alice", "text": "hi", "type": None}, "text"),
        ({"fromUid": "alice", "type": ""}, "text"),
    ],
)
def test_new_message_with_null_fields_still_notifies(
    dispatcher: EventDispatcher,
    chat_store: InMemoryChatStore,
    notifier: RecordingNotifier,
    snapshot: dict[str, object],
    message_type: str,
) -> None:
    chat_store.add_thread("t1", members=("alice", "bob"))

    dispatcher.on_created("threads/t1/messages/m1", snapshot)

    assert [(i.kind, i.recipient_uid) for i in notifier.intents] == [
        (NotificationKind.NEW_MESSAGE, "bob")
    ]
    assert notifier.intents[0].data == {"threadId": "t1", "messageType": message_type}


def test_message_in_missing_thread_is_ignored(
    dispatcher: EventDispatcher,
    notifier: RecordingNotifier,
) -> None:
    dispatcher.on_created("threads/gone/messages/m1", {"fromUid": "bob", "text": "hi"})

    assert notifier.intents == []


def test_friend_events_address_the_right_user(
    dispatcher: EventDispatcher,
    notifier: RecordingNotifier,
) -> None:
    dispatcher.on_created("users/bob/incoming/alice", {})
    dispatcher.on_created("users/bob/friends/alice", {})

    assert [(i.kind, i.recipient_uid, i.sender_uid) for i in notifier.intents] == [
        (NotificationKind.FRIEND_REQUEST, "bob", "alice"),
        (NotificationKind.FRIEND_ACCEPTED, "alice", "bob"),
    ]


def test_notifier_failure_does_not_escape(
    game_store: InMemoryGameStore,
    chat_store: InMemoryChatStore,
) -> None:
    dispatcher = EventDispatcher(
        game_unit_of_work_factory=game_store.unit_of_work,
        chat_unit_of_work_factory=chat_store.unit_of_work,
        notifier=FailingNotifier(),
    )
    guess = make_guess("g1", guesser="A", target="B", index=1)
    game_store.add_guess(guess)
    game_store.add_submission("B", lie_index=1)

    assert dispatcher.on_created("users/bob/incoming/alice", {}) is True
    dispatcher.on_created("games/two_truths_one_lie/guesses/g1", guess_snapshot(guess))

    entry = game_store.entry("A")
    assert entry is not None
    assert entry.correct_guesses == 1
