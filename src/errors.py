# errors.py
# Exceptions raised by the grid model and the move engine.

class GameError(Exception):
    """Base class for all errors raised by the game core."""


class OutOfBoundsError(GameError, IndexError):
    """Raised when a row or column lies outside the grid."""

    def __init__(self, row: int, col: int, size: int):
        self.row = row
        self.col = col
        self.size = size
        super().__init__(f"Cell ({row}, {col}) is outside a {size}x{size} grid.")


class InvalidTileValueError(GameError, ValueError):
    """Raised when a cell is given a value that is not a power of 2 (>= 2)."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid tile value {value!r}: tiles must be powers of 2 greater than 1.")


class EmptyHistoryError(GameError):
    """Raised when there is no snapshot left to restore."""

    def __init__(self):
        super().__init__("Undo history is empty.")
