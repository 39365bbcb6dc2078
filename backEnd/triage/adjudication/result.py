"""Explicit success/failure result for adjudication requests."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from ..errors import ProviderError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ProviderError


Result = Union[Ok[T], Err]
