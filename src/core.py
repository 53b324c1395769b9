# core.py
# This file is the move engine for the 2048 game: sliding, merging, scoring,
# undo and game status on top of the grid model.

import logging
import random
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

from errors import EmptyHistoryError
from grid import Board, Grid
from history import HistoryEntry, UndoHistory
from settings import GameSettings

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    WON = 2
    LOST = 3


class Direction(Enum):
    """Represents the possible move directions."""
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4


class MoveResult(NamedTuple):
    """Outcome of a single move."""
    changed: bool
    score_delta: int
    merges: int


Coordinates = List[Tuple[int, int]]


def parse_direction(direction: Union[Direction, str]) -> Direction:
    """
    Accepts a Direction or its case-insensitive name ("left", "UP", ...).
    Raises:
        ValueError: If the value does not name a direction.
    """
    if isinstance(direction, Direction):
        return direction
    if isinstance(direction, str):
        try:
            return Direction[direction.strip().upper()]
        except KeyError:
            pass
    raise ValueError(f"Invalid direction: {direction!r}. Must be one of UP, DOWN, LEFT, RIGHT.")

# --- Line Manipulation (Core Move Logic Helpers) ---

def _compress_line(line: List[int]) -> List[int]:
    """Moves all non-zero tiles to the start of the line, keeping their order."""
    compressed = [value for value in line if value != 0]
    return compressed + [0] * (len(line) - len(compressed))

def _merge_line(line: List[int]) -> Tuple[List[int], int, int]:
    """
    Merges adjacent identical numbers in a compressed line (moving towards index 0).
    A tile produced by a merge is never merged again in the same pass.
    Args:
        line (List[int]): The compressed line.
    Returns:
        Tuple[List[int], int, int]: Merged line, score increase, number of merges.
    """
    n = len(line)
    score_increase = 0
    merges = 0
    merged_line = [0] * n
    write_idx = 0
    read_idx = 0

    while read_idx < n and line[read_idx] != 0:
        current_val = line[read_idx]
        if read_idx + 1 < n and current_val == line[read_idx + 1]:
            merged_value = current_val * 2
            merged_line[write_idx] = merged_value
            score_increase += merged_value
            merges += 1
            read_idx += 2 # Skip the tile that was absorbed
        else:
            merged_line[write_idx] = current_val
            read_idx += 1
        write_idx += 1

    return merged_line, score_increase, merges

def process_line(line: Sequence[int]) -> Tuple[List[int], int, int]:
    """
    Applies compress, merge, then compress again to a single line.
    The line is given in slide order: index 0 is the edge tiles move towards.
    Args:
        line (Sequence[int]): The line to process (0 for empty cells).
    Returns:
        Tuple[List[int], int, int]: The processed line, score increase and merge count.
    """
    compressed = _compress_line(list(line))
    merged, score_delta, merges = _merge_line(compressed)
    return _compress_line(merged), score_delta, merges

# --- Line Traversal ---

def line_coordinates(size: int, direction: Direction) -> List[Coordinates]:
    """
    Lists every line of a size x size board as cell coordinates in slide order,
    starting at the edge the tiles move towards.

    Reading a line and writing it back both go through these coordinates, so
    all four directions share the same merge code.
    """
    forward = list(range(size))
    backward = forward[::-1]
    if direction == Direction.LEFT:
        return [[(row, col) for col in forward] for row in forward]
    if direction == Direction.RIGHT:
        return [[(row, col) for col in backward] for row in forward]
    if direction == Direction.UP:
        return [[(row, col) for row in forward] for col in forward]
    if direction == Direction.DOWN:
        return [[(row, col) for row in backward] for col in forward]
    raise ValueError("Invalid direction specified for line_coordinates.")

def slide_board(board: Board, direction: Direction) -> Tuple[List[List[int]], int, int]:
    """
    Computes the board after sliding in one direction, without touching the input.
    Returns:
        Tuple[List[List[int]], int, int]: New board, score gained and merge count.
    """
    new_board = [list(row) for row in board]
    score_gained = 0
    merges = 0
    for coords in line_coordinates(len(board), direction):
        line = [board[row][col] for row, col in coords]
        new_line, line_score, line_merges = process_line(line)
        for (row, col), value in zip(coords, new_line):
            new_board[row][col] = value
        score_gained += line_score
        merges += line_merges
    return new_board, score_gained, merges

# --- Game State Checks ---

def has_equal_neighbors(board: Board) -> bool:
    """True if any two cells sharing an edge hold the same tile."""
    n = len(board)
    for r in range(n):
        for c in range(n):
            value = board[r][c]
            if value == 0:
                continue
            if c + 1 < n and board[r][c + 1] == value:
                return True
            if r + 1 < n and board[r + 1][c] == value:
                return True
    return False

def determine_game_status(board: Board, win_tile: int = 2048) -> GameStatus:
    """
    Determines the progress state of the game from the board alone.
    Args:
        board (Board): The current game board.
        win_tile (int): Reaching this tile (or a larger one) wins. Default is 2048.
    Returns:
        GameStatus: WON, LOST or IN_PROGRESS, checked in that order.
    """
    if any(value >= win_tile for row in board for value in row):
        return GameStatus.WON

    board_is_full = all(value != 0 for row in board for value in row)
    if board_is_full and not has_equal_neighbors(board):
        return GameStatus.LOST

    return GameStatus.IN_PROGRESS


class MoveEngine:
    """
    Owns the grid, the score and the undo history of one game session.

    Callers only see read-only snapshots of the board; every change goes
    through `apply_move`, `spawn_random_tile`, `undo` or `restart`.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        grid: Optional[Grid] = None,
        score: int = 0,
    ):
        self._settings = settings or GameSettings()
        self._rng = rng if rng is not None else random.Random(self._settings.seed)
        self._history = UndoHistory(self._settings.history_capacity)
        if score < 0:
            raise ValueError("Score must be non-negative.")

        if grid is None:
            self._grid = Grid(self._settings.size)
            self.restart()
        else:
            if grid.size != self._settings.size:
                raise ValueError(
                    f"Grid size {grid.size} does not match configured size {self._settings.size}."
                )
            self._grid = Grid.from_rows(grid.rows())
            self._score = score

    @classmethod
    def from_board(
        cls,
        rows: Sequence[Sequence[Optional[int]]],
        score: int = 0,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> "MoveEngine":
        """
        Creates an engine around an existing position without spawning tiles.
        The configured size is taken from the board.
        """
        grid = Grid.from_rows(rows)
        base = settings or GameSettings()
        # Nothing is spawned here, so initial_tiles only matters for a later restart.
        initial_tiles = min(base.initial_tiles, grid.size * grid.size)
        settings = GameSettings.model_validate(
            {**base.model_dump(), "size": grid.size, "initial_tiles": initial_tiles}
        )
        return cls(settings=settings, rng=rng, grid=grid, score=score)

    # --- Read-only views ---

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def board(self) -> Board:
        return self._grid.rows()

    @property
    def score(self) -> int:
        return self._score

    @property
    def history_size(self) -> int:
        return len(self._history)

    def get(self, row: int, col: int) -> Optional[int]:
        return self._grid.get(row, col)

    # --- Actions ---

    def apply_move(self, direction: Union[Direction, str]) -> MoveResult:
        """
        Slides and merges every line towards `direction`.

        A snapshot of the board and score is pushed to the undo history only
        when the board actually changed. No tile is spawned here.
        Args:
            direction (Union[Direction, str]): The direction to move.
        Returns:
            MoveResult: Whether the board changed, the points gained and the merge count.
        Raises:
            ValueError: If an invalid direction is specified.
        """
        direction = parse_direction(direction)
        snapshot = HistoryEntry(board=self._grid.rows(), score=self._score)

        new_board, score_delta, merges = slide_board(snapshot.board, direction)
        if tuple(tuple(row) for row in new_board) == snapshot.board:
            logger.debug("Move %s did not change the board", direction.name)
            return MoveResult(changed=False, score_delta=0, merges=0)

        self._history.push(snapshot)
        self._grid.load(new_board)
        self._score += score_delta
        logger.debug(
            "Move %s: %d merge(s), +%d points, score %d",
            direction.name, merges, score_delta, self._score,
        )
        return MoveResult(changed=True, score_delta=score_delta, merges=merges)

    def spawn_random_tile(self) -> bool:
        """Places a new 2 or 4 on a random empty cell; False if the board is full."""
        return self._grid.spawn_random_tile(self._rng, self._settings.four_probability)

    def play(self, direction: Union[Direction, str]) -> MoveResult:
        """Applies a move and, if it changed the board, spawns exactly one tile."""
        result = self.apply_move(direction)
        if result.changed:
            self.spawn_random_tile()
        return result

    def undo(self) -> bool:
        """
        Restores the board and score from before the last changing move.
        Returns:
            bool: False if there was nothing to undo (the board is left as is).
        """
        try:
            entry = self._history.pop()
        except EmptyHistoryError:
            logger.debug("Nothing to undo")
            return False

        self._grid.load(entry.board)
        self._score = entry.score
        logger.debug("Undo: score restored to %d, %d snapshot(s) left", self._score, len(self._history))
        return True

    def restart(self) -> None:
        """Clears the board, score and history, then spawns the initial tiles."""
        self._grid.clear()
        self._score = 0
        self._history.clear()
        for _ in range(self._settings.initial_tiles):
            self.spawn_random_tile()
        logger.debug("New %dx%d game started", self._grid.size, self._grid.size)

    # --- Queries ---

    def status(self) -> GameStatus:
        """Recomputes the game status from the current board."""
        return determine_game_status(self._grid.rows(), self._settings.win_tile)

    def can_move(self, direction: Union[Direction, str]) -> bool:
        """True if moving in `direction` would change the board."""
        board = self._grid.rows()
        new_board, _, _ = slide_board(board, parse_direction(direction))
        return [list(row) for row in board] != new_board

    def available_moves(self) -> List[Direction]:
        return [direction for direction in Direction if self.can_move(direction)]
