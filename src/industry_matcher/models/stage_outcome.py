from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class StageOutcome(Generic[T]):
    """
    Value of an optional stage, or the reason it degraded.
    Callers fall back to the previous stage's value when `ok` is False.
    """
    value: Optional[T] = None
    degraded_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.degraded_reason is None

    @classmethod
    def success(cls, value: T) -> "StageOutcome[T]":
        return cls(value=value)

    @classmethod
    def degraded(cls, reason: str) -> "StageOutcome[T]":
        return cls(degraded_reason=reason)
