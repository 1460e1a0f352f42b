"""Authorised, resumable deletion of a thread and all of its messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from truthtally.config.settlement import DEFAULT_DELETE_PAGE_SIZE, MAX_BATCH_WRITES
from truthtally.domain.errors import (
    InvalidArgumentError,
    PermissionDeniedError,
    UnauthenticatedError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from truthtally.domain.ports.unit_of_work import ChatUnitOfWork

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Identity of an authenticated caller."""

    uid: str


@dataclass(frozen=True, slots=True)
class ThreadDeletionResult:
    ok: bool
    deleted: bool
    batches: int = 0

    def to_dict(self) -> dict[str, bool]:
        return {"ok": self.ok, "deleted": self.deleted}


def delete_thread(
    thread_id: object,
    caller: AuthContext | None,
    *,
    unit_of_work_factory: Callable[[], ChatUnitOfWork],
    page_size: int = DEFAULT_DELETE_PAGE_SIZE,
) -> ThreadDeletionResult:
    """Delete a thread after draining its messages in pages of ``page_size``.

    Each page is removed in its own batch, so an interrupted call leaves a thread
    with fewer messages and calling again picks up where it stopped. Messages
    appended after the last empty page are not caught.
    """

    if caller is None:
        raise UnauthenticatedError("Sign in required")
    if not isinstance(thread_id, str) or not thread_id:
        raise InvalidArgumentError("threadId is required")
    if not 1 <= page_size <= MAX_BATCH_WRITES:
        raise ValueError(f"page_size must be between 1 and {MAX_BATCH_WRITES}")

    with unit_of_work_factory() as uow:
        thread = uow.repositories.threads.get(thread_id)
        if thread is None:
            log.info("Thread %s does not exist, nothing to delete", thread_id)
            return ThreadDeletionResult(ok=True, deleted=False)
        if not thread.is_member(caller.uid):
            raise PermissionDeniedError("Not a thread member")
        remaining = uow.repositories.messages.count(thread_id)
    log.info("Deleting thread %s with %s remaining messages", thread_id, remaining)

    batches = 0
    while True:
        with unit_of_work_factory() as uow:
            page = uow.repositories.messages.list_page(thread_id, limit=page_size)
            if not page:
                break
            uow.repositories.messages.remove_batch(page)
            uow.commit()
        batches += 1
        log.debug("Deleted batch %s (%s messages) of thread %s", batches, len(page), thread_id)

    with unit_of_work_factory() as uow:
        thread = uow.repositories.threads.get(thread_id)
        if thread is not None:
            uow.repositories.threads.remove(thread)
            uow.commit()

    log.info("Deleted thread %s in %s batches for %s", thread_id, batches, caller.uid)
    return ThreadDeletionResult(ok=True, deleted=True, batches=batches)


__all__ = ["AuthContext", "ThreadDeletionResult", "delete_thread"]
