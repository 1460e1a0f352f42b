from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from truthtally.adapters.sqlalchemy import start_mappers
from truthtally.adapters.sqlalchemy.mappings import create_all_tables
from truthtally.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyChatUnitOfWork,
    SqlAlchemyGameUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    # a file database so that concurrent sessions get their own connections
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'truthtally.db'}", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_game_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyGameUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyGameUnitOfWork
    finally:
        shutdown()


@pytest.fixture
def sqlite_chat_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyChatUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyChatUnitOfWork
    finally:
        shutdown()
