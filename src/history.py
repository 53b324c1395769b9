# history.py
# Bounded undo buffer of (board, score) snapshots.

from collections import deque
from typing import Deque, NamedTuple

from errors import EmptyHistoryError
from grid import Board


class HistoryEntry(NamedTuple):
    """Immutable snapshot of the game taken right before a move."""
    board: Board
    score: int


class UndoHistory:
    """
    Last-in, first-out buffer of snapshots holding at most `capacity` entries.
    When full, pushing a new entry evicts the oldest one.
    """

    def __init__(self, capacity: int = 10):
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("History capacity must be a positive integer.")
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def push(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> HistoryEntry:
        """
        Removes and returns the most recent snapshot.
        Raises:
            EmptyHistoryError: If there is nothing to restore.
        """
        if not self._entries:
            raise EmptyHistoryError()
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
