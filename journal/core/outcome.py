"""Tagged results for calculations that can hit a zero denominator."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Degenerate:
    reason: str


Outcome = Union[Ok[T], Degenerate]


def unwrap_or(outcome: "Outcome[T]", default: T) -> T:
    if isinstance(outcome, Ok):
        return outcome.value
    return default
