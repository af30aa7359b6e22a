from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class BestEffortResult(Generic[T]):
    """Outcome of a step whose failure must not abort the request."""

    value: Optional[T] = None
    error: Optional[str] = None  # for logging/audit

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(cls, value: T) -> "BestEffortResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, error: str, value: Optional[T] = None) -> "BestEffortResult[T]":
        return cls(value=value, error=error)
