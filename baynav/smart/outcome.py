"""
Typed outcomes for external calls.

Every call to the search index or a language model resolves to either
Ok(value) or Fallback(reason). Callers branch on the type and move to the
next cheaper tier on Fallback; nothing unwinds through the pipeline.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Fallback:
    reason: str


Outcome = Union[Ok[Any], Fallback]
