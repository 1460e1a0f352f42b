"""SQLAlchemy mapping metadata for the truthtally domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from truthtally.domain.model import (
    Guess,
    LeaderboardEntry,
    LeaderboardSide,
    Message,
    PrivateSubmission,
    SettledEffect,
    Thread,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Game tables -----------------------------------------------------------------

guess_table = Table(
    "guess",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("guesser_uid", String, nullable=False),
    Column("target_uid", String, nullable=False),
    Column("guessed_lie_index", Integer, nullable=False),
    Column("is_correct", Boolean, nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
)

private_submission_table = Table(
    "private_submission",
    mapper_registry.metadata,
    Column("uid", String, primary_key=True),
    Column("lie_index", Integer, nullable=False),
    Column("submitted_at", UTCDateTime(), nullable=True),
)

leaderboard_entry_table = Table(
    "leaderboard_entry",
    mapper_registry.metadata,
    Column("uid", String, primary_key=True),
    Column("correct_guesses", Integer, nullable=False, default=0),
    Column("total_guesses", Integer, nullable=False, default=0),
    Column("people_fooled", Integer, nullable=False, default=0),
    Column("times_guessed_on", Integer, nullable=False, default=0),
    Column("updated_at", UTCDateTime(), nullable=True),
    # optimistic concurrency token, bumped by the ORM on every update
    Column("version", Integer, nullable=False),
)

settled_effect_table = Table(
    "settled_effect",
    mapper_registry.metadata,
    Column("guess_id", String, primary_key=True),
    Column("side", Enum(LeaderboardSide, native_enum=False), primary_key=True),
    Column("uid", String, nullable=False),
    Column("applied_at", UTCDateTime(), nullable=True),
)

# Chat tables -----------------------------------------------------------------

thread_table = Table(
    "thread",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("user_a_uid", String, nullable=False),
    Column("user_b_uid", String, nullable=False),
    Column("created_at", UTCDateTime(), nullable=True),
)

message_table = Table(
    "message",
    mapper_registry.metadata,
    Column("thread_id", String, ForeignKey("thread.id"), primary_key=True),
    Column("id", String, primary_key=True),
    Column("from_uid", String, nullable=False),
    Column("text", String, nullable=False, default=""),
    Column("type", String, nullable=False, default="text"),
    Column("created_at", UTCDateTime(), nullable=True),
    Index("ix_message_thread_order", "thread_id", "id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    log.debug("Configuring SQLAlchemy mappers")
    mapper_registry.map_imperatively(Guess, guess_table)
    mapper_registry.map_imperatively(PrivateSubmission, private_submission_table)
    mapper_registry.map_imperatively(
        LeaderboardEntry,
        leaderboard_entry_table,
        version_id_col=leaderboard_entry_table.c.version,
    )
    mapper_registry.map_imperatively(SettledEffect, settled_effect_table)
    mapper_registry.map_imperatively(Thread, thread_table)
    mapper_registry.map_imperatively(Message, message_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
