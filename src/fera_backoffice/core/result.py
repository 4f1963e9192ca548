"""Discriminated result for expected failures of pure core functions.

Services unwrap with `unwrap_or_raise`, which turns `Err` into the
`ValidationError` the controllers already know how to report.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .exceptions import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    reason: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def unwrap_or_raise(result: "Result[T]") -> T:
    if isinstance(result, Err):
        raise ValidationError(result.reason)
    return result.value
