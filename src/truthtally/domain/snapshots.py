"""Pydantic models for raw document snapshots delivered by the change feed."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationInfo, field_validator


class SnapshotModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GuessPayload(SnapshotModel):
    # a client-written ``isCorrect`` is ignored with the other extras; settlement
    # alone decides the verdict
    guesser_uid: str = Field(alias="guesserUid", strict=True)
    target_uid: str = Field(alias="targetUid", strict=True)
    guessed_lie_index: StrictInt = Field(alias="guessedLieIndex")

    @field_validator("guesser_uid", "target_uid")
    @classmethod
    def require_identifier(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("identifier must not be blank")
        return value


class CallPayload(SnapshotModel):
    caller_uid: str | None = Field(default=None, alias="callerUid")
    callee_uid: str | None = Field(default=None, alias="calleeUid")
    status: str | None = None


class MessagePayload(SnapshotModel):
    from_uid: str = Field(alias="fromUid")
    text: str = ""
    type: str = "text"

    @field_validator("text", "type", mode="before")
    @classmethod
    def default_when_null(cls, value: object, info: ValidationInfo) -> object:
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value


__all__ = ["CallPayload", "GuessPayload", "MessagePayload", "SnapshotModel"]
