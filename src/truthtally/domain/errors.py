"""Domain error hierarchy."""

from __future__ import annotations

from typing import ClassVar


class StoreError(RuntimeError):
    """Raised when the backing store cannot complete an operation."""


class TransactionConflictError(StoreError):
    """Raised on commit when data read by the transaction changed underneath it."""


class TransactionRetryLimitError(StoreError):
    """Raised when a transaction keeps conflicting after the allowed attempts."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Transaction still conflicting after {attempts} attempts")
        self.attempts = attempts


class CallableError(Exception):
    """Structured failure returned to callers of request operations."""

    code: ClassVar[str] = "unknown"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class UnauthenticatedError(CallableError):
    code = "unauthenticated"


class InvalidArgumentError(CallableError):
    code = "invalid-argument"


class PermissionDeniedError(CallableError):
    code = "permission-denied"


class InternalError(CallableError):
    code = "internal"
