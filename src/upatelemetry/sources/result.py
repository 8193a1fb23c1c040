"""Tagged fetch results returned by every upstream source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SourceOk(Generic[T]):
    value: T
    source: str = ""


@dataclass(frozen=True)
class SourceFailure:
    """A failed fetch; ``reason`` is meant for humans (it ends up in the event log)."""

    reason: str
    source: str = ""
