"""
Result values for lookups that may legitimately find nothing.

Chapter lookups return ``Result`` rather than ``None`` so a miss always
carries an ``ErrorCode`` and a message the caller can log.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from .types import ErrorCode

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a lookup.

    Usage:
        result = chapters.find_by_name("02-setup")
        if not result.ok:
            return web.Response(status=404, text=result.error)
        chapter = result.data
    """

    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: str = "OK"

    @staticmethod
    def Ok(data: T) -> "Result[T]":
        return Result(ok=True, data=data)

    @staticmethod
    def Err(code: "ErrorCode | str", error: str) -> "Result[T]":
        return Result(ok=False, error=error, code=code.value if isinstance(code, Enum) else str(code))

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Apply ``fn`` to the value of a successful result; errors pass through unchanged."""
        if not self.ok:
            return self  # type: ignore[return-value]
        return Result.Ok(fn(self.data))  # type: ignore[arg-type]

    def unwrap(self) -> T:
        """The value, or ``ValueError`` naming the error code."""
        if not self.ok:
            raise ValueError(f"[{self.code}] {self.error}")
        return self.data  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        return self.data if self.ok else default  # type: ignore[return-value]
