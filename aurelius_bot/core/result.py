"""Tiny ``Ok``/``Err`` pair returned from the remote mirror boundary.

Remote writes are best effort, so instead of raising they hand back a value
the caller has to look at before deciding to ignore a failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]

__all__ = ["Err", "Ok", "Result"]
