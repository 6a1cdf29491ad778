# -*- coding: utf-8 -*-
"""
Bounded undo history.
"""
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple

from numpy import ndarray


class Snapshot(NamedTuple):
    """Board and score before an accepted move."""

    board: ndarray
    score: int


@dataclass(frozen=True, eq=False)
class History:
    """
    Fixed-capacity ring buffer of snapshots.

    Slots are addressed by index: ``write`` points at the next slot to fill and ``n_entries`` counts the
    stored snapshots. When the ring is full, a push overwrites the oldest snapshot. Instances are
    immutable; ``push`` and ``pop`` return a new history and leave this one untouched.
    """

    capacity: int
    slots: tuple[Snapshot | None, ...] = field(default=(), repr=False)
    write: int = 0
    n_entries: int = 0

    def __post_init__(self):
        if self.capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {self.capacity}")
        if not self.slots:
            object.__setattr__(self, "slots", (None,) * self.capacity)

    def push(self, snapshot: Snapshot) -> "History":
        """Return a history with ``snapshot`` as its most recent entry."""
        if self.capacity == 0:
            return self

        slots = list(self.slots)
        slots[self.write] = snapshot
        return History(
            capacity=self.capacity,
            slots=tuple(slots),
            write=(self.write + 1) % self.capacity,
            n_entries=min(self.n_entries + 1, self.capacity),
        )

    def pop(self) -> tuple[Snapshot, "History"]:
        """
        Remove the most recent snapshot.

        Returns
        -------
        tuple[Snapshot, History]
            The most recent snapshot and the history without it.

        Raises
        ------
        IndexError
            If the history is empty.
        """
        if self.n_entries == 0:
            raise IndexError("pop from empty history")

        index = (self.write - 1) % self.capacity
        slots = list(self.slots)
        snapshot, slots[index] = slots[index], None
        return snapshot, History(capacity=self.capacity, slots=tuple(slots), write=index, n_entries=self.n_entries - 1)

    def peek(self) -> Snapshot | None:
        """Return the most recent snapshot, or None if the history is empty."""
        if self.n_entries == 0:
            return None
        return self.slots[(self.write - 1) % self.capacity]

    def __iter__(self) -> Iterator[Snapshot]:
        """Iterate from the oldest to the most recent snapshot."""
        start = (self.write - self.n_entries) % max(self.capacity, 1)
        for offset in range(self.n_entries):
            yield self.slots[(start + offset) % self.capacity]

    def __len__(self) -> int:
        return self.n_entries
