"""Result types returned by every reconciliation step."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    """Classification of a failed operation."""

    PRECONDITION = "precondition"
    CONFLICT = "conflict"
    REMOTE = "remote"
    PROPAGATION_TIMEOUT = "propagation_timeout"
    PARTIAL_BATCH = "partial_batch"
    POLICY = "policy"
    KEY_MANAGEMENT = "key_management"


@dataclass(frozen=True)
class Problem:
    """A single reportable problem with an optional underlying cause."""

    message: str
    cause: BaseException | None = None


@dataclass(frozen=True)
class FailedOperation:
    """Summary of a failed operation plus every problem that caused it."""

    message: str
    problems: tuple[Problem, ...] = ()
    kind: FailureKind = FailureKind.REMOTE

    @classmethod
    def single(
        cls,
        message: str,
        kind: FailureKind,
        cause: BaseException | None = None,
    ) -> FailedOperation:
        """Build a failure whose only problem repeats the summary message."""
        return cls(message=message, problems=(Problem(message, cause),), kind=kind)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a successful value or a failed operation."""

    value: T | None = None
    failure: FailedOperation | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, failure: FailedOperation) -> Result[T]:
        return cls(failure=failure)

    @classmethod
    def error(
        cls,
        message: str,
        kind: FailureKind,
        cause: BaseException | None = None,
    ) -> Result[T]:
        return cls(failure=FailedOperation.single(message, kind, cause))
