# grid.py
# The N x N matrix of tiles. Empty cells are stored as 0.

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from errors import InvalidTileValueError, OutOfBoundsError
from settings import is_power_of_two

logger = logging.getLogger(__name__)

Board = Tuple[Tuple[int, ...], ...]


def validate_tile_value(value: Optional[int]) -> int:
    """
    Normalizes a cell value for storage.
    Args:
        value (Optional[int]): None or 0 for an empty cell, otherwise a tile.
    Returns:
        int: The value to store (0 for empty).
    Raises:
        InvalidTileValueError: If the value is not empty and not a power of 2 >= 2.
    """
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTileValueError(value)
    if value == 0:
        return 0
    if value < 2 or not is_power_of_two(value):
        raise InvalidTileValueError(value)
    return value


class Grid:
    """Fixed-size square grid of optional tile values."""

    def __init__(self, size: int = 4):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Board size must be a positive integer.")
        self._size = size
        self._cells: List[List[int]] = [[0] * size for _ in range(size)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[int]]]) -> "Grid":
        """
        Builds a grid from a square list of lists (0 or None for empty cells).
        Args:
            rows (Sequence[Sequence[Optional[int]]]): The board contents.
        Returns:
            Grid: A new grid holding a copy of the contents.
        Raises:
            ValueError: If the board is not square or empty.
            InvalidTileValueError: If any cell holds an invalid value.
        """
        if not rows or not all(len(row) == len(rows) for row in rows):
            raise ValueError("Board must be a non-empty square matrix.")
        grid = cls(len(rows))
        grid.load(rows)
        return grid

    @property
    def size(self) -> int:
        return self._size

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self._size and 0 <= col < self._size):
            raise OutOfBoundsError(row, col, self._size)

    def get(self, row: int, col: int) -> Optional[int]:
        """Returns the tile at (row, col), or None if the cell is empty."""
        self._check_bounds(row, col)
        value = self._cells[row][col]
        return value if value else None

    def set(self, row: int, col: int, value: Optional[int]) -> None:
        """
        Overwrites a cell.
        Args:
            row (int): Row index.
            col (int): Column index.
            value (Optional[int]): None or 0 to clear, otherwise a power of 2 >= 2.
        Raises:
            OutOfBoundsError: If (row, col) is outside the grid.
            InvalidTileValueError: If the value is not a valid tile.
        """
        self._check_bounds(row, col)
        self._cells[row][col] = validate_tile_value(value)

    def load(self, rows: Sequence[Sequence[Optional[int]]]) -> None:
        """
        Replaces every cell from a snapshot of the same size.
        The grid is left untouched if any value is rejected.
        """
        if len(rows) != self._size or not all(len(row) == self._size for row in rows):
            raise ValueError(f"Snapshot must be a {self._size}x{self._size} matrix.")
        validated = [[validate_tile_value(value) for value in row] for row in rows]
        self._cells = validated

    def clear(self) -> None:
        self._cells = [[0] * self._size for _ in range(self._size)]

    def rows(self) -> Board:
        """Read-only snapshot of the grid (0 for empty cells)."""
        return tuple(tuple(row) for row in self._cells)

    def empty_cells(self) -> Iterator[Tuple[int, int]]:
        """
        Lazily yields coordinates of empty cells in row-major order.
        Returns:
            Iterator[Tuple[int, int]]: (row, col) tuples for empty cells.
        """
        for row in range(self._size):
            for col in range(self._size):
                if self._cells[row][col] == 0:
                    yield row, col

    def is_full(self) -> bool:
        return next(self.empty_cells(), None) is None

    def occupied_count(self) -> int:
        return sum(1 for row in self._cells for value in row if value)

    def max_tile(self) -> int:
        """Largest tile on the board, 0 for an empty board."""
        return max(max(row) for row in self._cells)

    def spawn_random_tile(self, rng, four_probability: float = 0.1) -> bool:
        """
        Adds a new tile (2, or 4 with probability `four_probability`) to an empty cell.
        Args:
            rng: Randomness source with `choice` and `random` (e.g. random.Random).
            four_probability (float): Chance that the new tile is a 4. Default is 0.1.
        Returns:
            bool: True if a tile was placed, False if the grid was already full.
        """
        empty_cells = list(self.empty_cells())
        if not empty_cells:
            return False

        row, col = rng.choice(empty_cells)
        value = 4 if rng.random() < four_probability else 2
        self._cells[row][col] = value
        logger.debug("Spawned %d at (%d, %d)", value, row, col)
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Grid({self._cells!r})"
