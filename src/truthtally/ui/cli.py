from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING, cast

from dotenv import load_dotenv

from truthtally.adapters.sqlalchemy.unit_of_work import startup
from truthtally.app import (
    build_dispatcher,
    delete_thread_recursive,
    get_leaderboard_entry,
    settle_stored_guess,
)
from truthtally.config import configure_logging
from truthtally.domain.errors import CallableError
from truthtally.domain.thread_deletion import AuthContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Settle guesses and manage chat threads")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the database schema")

    settle = subparsers.add_parser("settle-guess", help="Re-run settlement for a stored guess")
    settle.add_argument("--guess-id", type=str, required=True, help="Id of the guess")

    delete = subparsers.add_parser("delete-thread", help="Delete a thread and its messages")
    delete.add_argument("--thread-id", type=str, required=True, help="Id of the thread")
    delete.add_argument(
        "--uid",
        type=str,
        help="Uid of the requesting member (omitting it is an unauthenticated call)",
    )
    delete.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Messages removed per batch (defaults to config)",
    )

    leaderboard = subparsers.add_parser("leaderboard", help="Show a participant's counters")
    leaderboard.add_argument("--uid", type=str, required=True, help="Participant uid")

    dispatch = subparsers.add_parser("dispatch", help="Deliver a document event by hand")
    dispatch.add_argument("--path", type=str, required=True, help="Document path")
    dispatch.add_argument("--data", type=str, required=True, help="JSON snapshot after the write")
    dispatch.add_argument(
        "--before",
        type=str,
        help="JSON snapshot before the write (makes this an update event)",
    )

    return parser.parse_args(list(argv))


def _parse_snapshot(value: str) -> dict[str, object]:
    try:
        loaded = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON snapshot: {value}") from exc
    if not isinstance(loaded, dict):
        raise ValueError("Snapshot must be a JSON object")
    return cast(dict[str, object], loaded)


def _run(parsed_args: argparse.Namespace) -> None:
    if parsed_args.command == "init-db":
        startup()
        log.info("Database ready")
    elif parsed_args.command == "settle-guess":
        verdict = settle_stored_guess(parsed_args.guess_id)
        log.info("Settlement of %s finished: verdict=%s", parsed_args.guess_id, verdict)
    elif parsed_args.command == "delete-thread":
        auth = AuthContext(uid=parsed_args.uid) if parsed_args.uid else None
        result = delete_thread_recursive(
            {"threadId": parsed_args.thread_id},
            auth,
            page_size=parsed_args.page_size,
        )
        log.info("Thread deletion finished: %s", result)
    elif parsed_args.command == "leaderboard":
        entry = get_leaderboard_entry(parsed_args.uid)
        if entry is None:
            log.info("No leaderboard entry for %s", parsed_args.uid)
        else:
            log.info(
                "%s: correct=%s, total=%s, fooled=%s, guessed_on=%s, updated=%s",
                entry.uid,
                entry.correct_guesses,
                entry.total_guesses,
                entry.people_fooled,
                entry.times_guessed_on,
                entry.updated_at,
            )
    elif parsed_args.command == "dispatch":
        dispatcher = build_dispatcher()
        after = _parse_snapshot(parsed_args.data)
        if parsed_args.before is not None:
            before = _parse_snapshot(parsed_args.before)
            routed = dispatcher.on_updated(parsed_args.path, before, after)
        else:
            routed = dispatcher.on_created(parsed_args.path, after)
        if not routed:
            log.warning("No handler for %s", parsed_args.path)
    else:
        raise ValueError(f"Unsupported command: {parsed_args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "delete-thread" and parsed_args.page_size is not None:
            if parsed_args.page_size < 1:
                raise ValueError("Page size must be positive")  # noqa: TRY301
        if parsed_args.command == "dispatch":
            _parse_snapshot(parsed_args.data)
            if parsed_args.before is not None:
                _parse_snapshot(parsed_args.before)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except CallableError as exc:
        log.error("Request rejected (%s): %s", exc.code, exc.message)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
