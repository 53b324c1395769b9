# cli_driver.py
# This file is intended to be run to play the 2048 game on the CLI.
# It maps keys to engine calls and prints the board; all rules live in core.py.

import argparse
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from core import Direction, GameStatus, MoveEngine
from grid import Board
from settings import GameSettings

logger = logging.getLogger(__name__)


class Action(Enum):
    MOVE = 1
    UNDO = 2
    RESTART = 3
    QUIT = 4


class Command(NamedTuple):
    action: Action
    direction: Optional[Direction] = None


ESCAPE = "\x1b"

KEY_BINDINGS: Dict[str, Command] = {
    "w": Command(Action.MOVE, Direction.UP),
    "k": Command(Action.MOVE, Direction.UP),
    "s": Command(Action.MOVE, Direction.DOWN),
    "j": Command(Action.MOVE, Direction.DOWN),
    "d": Command(Action.MOVE, Direction.RIGHT),
    "l": Command(Action.MOVE, Direction.RIGHT),
    "a": Command(Action.MOVE, Direction.LEFT),
    "h": Command(Action.MOVE, Direction.LEFT),
    "u": Command(Action.UNDO),
    "z": Command(Action.UNDO),
    "r": Command(Action.RESTART),
    "q": Command(Action.QUIT),
    ESCAPE: Command(Action.QUIT),
}

# rich style per tile value; anything above 2048 uses BIG_TILE_STYLE.
TILE_STYLES: Dict[int, str] = {
    0: "bright_black",
    2: "green",
    4: "yellow",
    8: "blue",
    16: "magenta",
    32: "red",
    64: "cyan",
    128: "bright_green",
    256: "bright_yellow",
    512: "bright_blue",
    1024: "bright_magenta",
    2048: "bright_red",
}
BIG_TILE_STYLE = "bright_cyan"
GAME_OVER_STYLE = "bold red"


def parse_command(text: str) -> Optional[Command]:
    """Maps one line of user input to a command, or None if it is not bound."""
    key = text.strip(" \t\r\n").lower()
    return KEY_BINDINGS.get(key)


def tile_style(value: int) -> str:
    return TILE_STYLES.get(value, BIG_TILE_STYLE)


# --- Display Functions ---

def render_board(board: Board, color: bool = True) -> List[Text]:
    """Draws each cell as a 3-line box, styled per tile value when color is on."""
    lines = []
    for row in board:
        top, middle, bottom = Text(), Text(), Text()
        for value in row:
            content = f"{value:^5}" if value else " " * 5
            style = tile_style(value) if color else ""
            top.append("┌─────┐ ", style=style)
            middle.append(f"│{content}│ ", style=style)
            bottom.append("└─────┘ ", style=style)
        for line in (top, middle, bottom):
            line.rstrip()
            lines.append(line)
    return lines


def render_game(engine: MoveEngine, message: Optional[str] = None) -> Text:
    """Score line, board, then an optional status message."""
    color = engine.settings.color
    lines = [Text(f"Score: {engine.score}"), Text()]
    lines.extend(render_board(engine.board, color))

    progress = engine.status()
    if progress == GameStatus.WON:
        lines.append(Text(f"YOU WON! Final Score: {engine.score}"))
    elif progress == GameStatus.LOST:
        lines.append(Text(f"GAME OVER! Final Score: {engine.score}", style=GAME_OVER_STYLE if color else ""))
    if progress != GameStatus.IN_PROGRESS:
        lines.append(Text("Press 'r' to restart, 'u' to undo or 'q' to quit."))

    if message:
        lines.append(Text(message))
    return Text("\n").join(lines)


# --- Game Loop ---

def run(
    engine: MoveEngine,
    read: Optional[Callable[[str], str]] = None,
    write: Optional[Callable[[Any], None]] = None,
) -> int:
    """
    Plays until the user quits or input runs out.
    Args:
        engine (MoveEngine): The game session to drive.
        read (Optional[Callable[[str], str]]): Prompts for and returns one line of input.
            Defaults to the built-in input().
        write (Optional[Callable[[Any], None]]): Outputs one block of text or a rich Text.
            Defaults to a rich Console honouring the color setting.
    Returns:
        int: The final score.
    """
    read = read or input
    if write is None:
        write = Console(no_color=not engine.settings.color).print
    message: Optional[str] = None
    while True:
        write(render_game(engine, message))
        message = None
        try:
            text = read("Move (w/a/s/d), undo (u), restart (r), quit (q): ")
        except EOFError:
            break

        command = parse_command(text)
        if command is None:
            message = "Invalid input. Use w/a/s/d or h/j/k/l to move, u to undo, r to restart, q to quit."
            continue

        if command.action == Action.QUIT:
            break
        elif command.action == Action.RESTART:
            engine.restart()
        elif command.action == Action.UNDO:
            if not engine.undo():
                message = "Nothing to undo."
        elif engine.status() != GameStatus.IN_PROGRESS:
            # Won and lost games only accept restart, undo or quit
            message = "The game is over."
        elif not engine.play(command.direction).changed:
            message = "Move did not change the board. Try a different direction."

    write(f"Final Score: {engine.score}")
    return engine.score


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal.")
    parser.add_argument("--size", type=int, default=4, help="Board dimension N for an N x N board (default: 4)")
    parser.add_argument("--win-tile", type=int, default=2048, help="Tile value that wins the game (default: 2048)")
    parser.add_argument("--four-probability", type=float, default=0.1,
                        help="Probability that a spawned tile is a 4 (default: 0.1)")
    parser.add_argument("--history", type=int, default=10, help="Number of moves that can be undone (default: 10)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored tiles")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible games")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: WARNING)")
    return parser


def settings_from_args(args: argparse.Namespace) -> GameSettings:
    return GameSettings(
        size=args.size,
        win_tile=args.win_tile,
        four_probability=args.four_probability,
        history_capacity=args.history,
        color=not args.no_color,
        seed=args.seed,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    logger.info("Starting game with %s", settings)
    engine = MoveEngine(settings)
    run(engine, write=Console(no_color=args.no_color).print)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
