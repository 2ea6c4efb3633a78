"""Source positions and located values used for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_SOURCE = "<attributes>"


@dataclass(frozen=True, order=True)
class Span:
    """A 1-based ``line``/``column`` position inside a named source."""

    line: int
    column: int
    source: str = DEFAULT_SOURCE

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Spanned(Generic[T]):
    """A value paired with the position it was read from."""

    item: T
    span: Span
