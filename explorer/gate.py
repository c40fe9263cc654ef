"""
explorer/gate.py - Last-input-wins ordering for resolvers bound to changing input.

Each new input takes a ticket. A result may be applied only while its
ticket is still the latest one; late answers for superseded inputs are
dropped.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ticket(Generic[T]):
    """Issued per input; compared by sequence number."""
    seq: int
    value: T


class LatestInputGate(Generic[T]):
    """Tracks the latest input and answers whether a ticket is still current."""

    def __init__(self):
        self._seq = 0
        self._latest: Ticket[T] | None = None

    def issue(self, value: T) -> Ticket[T]:
        """Register a new input, superseding all earlier tickets."""
        self._seq += 1
        self._latest = Ticket(seq=self._seq, value=value)
        return self._latest

    def is_current(self, ticket: Ticket[Any]) -> bool:
        return self._latest is not None and ticket.seq == self._latest.seq

    @property
    def latest(self) -> T | None:
        return None if self._latest is None else self._latest.value
