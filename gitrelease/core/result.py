"""Result type for explicit error handling.

Every release step returns a Result instead of raising, so the pipeline can
stop at the first failure and report it without try/except at each call site.

Usage:
    def find_tag(version: str) -> Result[str, ReleaseError]:
        if not version:
            return Err(ReleaseError(kind="invalid_config", message="empty version"))
        return Ok(version)

    match find_tag("1.2.3"):
        case Ok(tag):
            console.print(f"tag: {tag}")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result holding `value`."""

    value: T

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Applies `f` to the contained value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result holding `error`."""

    error: E

    def map(self, f: Callable[[T], U]) -> Err[E]:
        """Returns self unchanged (no value to map)."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[E]
