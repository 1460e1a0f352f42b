"""Bounded optimistic transactions on top of a unit of work."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from truthtally.config.settlement import DEFAULT_MAX_TRANSACTION_ATTEMPTS
from truthtally.domain.errors import TransactionConflictError, TransactionRetryLimitError

if TYPE_CHECKING:
    from collections.abc import Callable

    from truthtally.domain.ports.unit_of_work import RepositoryCollection, UnitOfWork

log = logging.getLogger(__name__)


def run_transaction[TRepositories: RepositoryCollection, TResult](
    unit_of_work_factory: Callable[[], UnitOfWork[TRepositories]],
    work: Callable[[UnitOfWork[TRepositories]], TResult],
    *,
    max_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS,
) -> TResult:
    """Run ``work`` in a fresh unit of work and commit, retrying on conflicts.

    Every attempt opens a new unit of work so ``work`` always reads the current
    state. ``work`` must not have side effects outside the unit of work.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        with unit_of_work_factory() as uow:
            result = work(uow)
            try:
                uow.commit()
            except TransactionConflictError:
                log.debug("Transaction conflict on attempt %s/%s", attempt, max_attempts)
                continue
            return result

    raise TransactionRetryLimitError(max_attempts)


__all__ = ["run_transaction"]
