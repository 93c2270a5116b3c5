"""
Tagged results returned by the data-access functions.

A lookup that finds nothing resolves to ``Ok(None)`` (or ``Ok([])`` for row
sets); a store that could not answer resolves to ``Err(kind)``. Callers
branch with ``isinstance`` so the two cases cannot be confused.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    STORE_UNAVAILABLE = "store_unavailable"
    QUERY_FAILED = "query_failed"
    CONSTRAINT_VIOLATION = "constraint_violation"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str = ""


Result = Union[Ok[T], Err]
