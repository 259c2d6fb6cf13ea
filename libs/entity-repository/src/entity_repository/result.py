"""Explicit success/failure wrapper returned by every repository operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from entity_repository.exceptions import EngineFailure

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a repository operation.

    ``value`` always holds something usable: the operation's return value on
    success, or the neutral value (empty list, ``None``) on failure. Check
    :attr:`ok` to tell "no rows matched" apart from "the engine failed".
    """

    value: T
    error: EngineFailure | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: EngineFailure, default: T) -> Result[T]:
        return cls(value=default, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the recorded :class:`EngineFailure` if any."""
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None else default
