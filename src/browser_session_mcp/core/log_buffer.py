"""Bounded capture of page console output."""

from collections import deque
from typing import Iterable


class LogBuffer:
    """
    Ordered, capacity-bounded list of console entries.

    Appending past capacity drops the oldest entries first.
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._entries: deque[str] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def append(self, entry: str) -> None:
        self._entries.append(entry)

    def extend(self, entries: Iterable[str]) -> None:
        self._entries.extend(entries)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> list[str]:
        """Copy of the current entries, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
