from __future__ import annotations

import io
from typing import Iterable, List

import pytest
from rich.console import Console

from cli_driver import (
    Action,
    Command,
    build_parser,
    main,
    parse_command,
    render_board,
    render_game,
    run,
    settings_from_args,
)
from core import Direction, MoveEngine
from settings import GameSettings


def scripted_input(lines: Iterable[str]):
    remaining = list(lines)

    def _read(prompt: str) -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return _read


def plain_engine(rows, score: int = 0, **settings) -> MoveEngine:
    return MoveEngine.from_board(rows, score=score, settings=GameSettings(color=False, **settings))


@pytest.mark.parametrize(
    "text,expected",
    [
        ("w", Command(Action.MOVE, Direction.UP)),
        ("W\n", Command(Action.MOVE, Direction.UP)),
        ("k", Command(Action.MOVE, Direction.UP)),
        ("s", Command(Action.MOVE, Direction.DOWN)),
        (" d ", Command(Action.MOVE, Direction.RIGHT)),
        ("a", Command(Action.MOVE, Direction.LEFT)),
        ("h", Command(Action.MOVE, Direction.LEFT)),
        ("L", Command(Action.MOVE, Direction.RIGHT)),
        ("u", Command(Action.UNDO)),
        ("z", Command(Action.UNDO)),
        ("r", Command(Action.RESTART)),
        ("q", Command(Action.QUIT)),
        ("\x1b", Command(Action.QUIT)),
    ],
)
def test_parse_command(text: str, expected: Command) -> None:
    assert parse_command(text) == expected


@pytest.mark.parametrize("text", ["", "x", "left", "\x1b[A"])
def test_parse_command_unknown(text: str) -> None:
    assert parse_command(text) is None


def test_render_board_without_color() -> None:
    lines = render_board(((2, 0), (0, 2048)), color=False)

    assert [line.plain for line in lines] == [
        "┌─────┐ ┌─────┐",
        "│  2  │ │     │",
        "└─────┘ └─────┘",
        "┌─────┐ ┌─────┐",
        "│     │ │2048 │",
        "└─────┘ └─────┘",
    ]


def test_render_board_with_color_styles_tiles() -> None:
    lines = render_board(((2, 4096), (0, 0)), color=True)

    styles = [str(span.style) for span in lines[1].spans]
    assert styles == ["green", "bright_cyan"]
    assert [str(span.style) for span in lines[4].spans] == ["bright_black", "bright_black"]


def test_render_board_without_color_has_no_styles() -> None:
    lines = render_board(((2, 4096), (0, 0)), color=False)

    assert all(not span.style for line in lines for span in line.spans)


def test_colored_board_reaches_terminal_as_ansi() -> None:
    console = Console(file=io.StringIO(), force_terminal=True, color_system="standard", width=80)

    console.print(render_board(((2, 0), (0, 0)), color=True)[1])

    output = console.file.getvalue()
    assert "\x1b[" in output
    assert "2" in output


def test_render_game_reports_game_over() -> None:
    engine = plain_engine([[2, 4], [4, 2]], score=12)

    text = render_game(engine, message="hello").plain

    assert text.splitlines()[0] == "Score: 12"
    assert "GAME OVER! Final Score: 12" in text
    assert text.endswith("hello")


def _run(engine: MoveEngine, keys: List[str]) -> List[str]:
    output: List[str] = []
    run(engine, read=scripted_input(keys), write=lambda block: output.append(str(block)))
    return output


def test_run_moves_and_undoes() -> None:
    engine = plain_engine([[2, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4])

    output = _run(engine, ["a", "u", "q"])

    assert engine.score == 0
    assert engine.board[0] == (2, 2, 0, 0)
    assert output[1].startswith("Score: 4")
    assert output[-1] == "Final Score: 0"


def test_run_reports_noop_and_bad_input() -> None:
    engine = plain_engine([[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])

    output = _run(engine, ["a", "?", "u"])

    assert "Move did not change the board" in output[1]
    assert "Invalid input" in output[2]
    assert "Nothing to undo." in output[3]
    assert output[-1] == "Final Score: 0"


def test_run_blocks_moves_after_game_over() -> None:
    engine = plain_engine([[2, 4], [4, 2]])

    output = _run(engine, ["a", "r"])

    assert "The game is over." in output[1]
    # Restart spawned two fresh tiles on the 2x2 board.
    assert sum(1 for row in engine.board for v in row if v) == 2
    assert "GAME OVER" not in output[2]


def test_settings_from_args() -> None:
    args = build_parser().parse_args(
        ["--size", "5", "--win-tile", "512", "--four-probability", "0.25", "--history", "3", "--no-color", "--seed", "9"]
    )

    settings = settings_from_args(args)

    assert settings == GameSettings(
        size=5, win_tile=512, four_probability=0.25, history_capacity=3, color=False, seed=9
    )


def test_main_rejects_invalid_settings(capsys) -> None:
    with pytest.raises(SystemExit) as e:
        main(["--size", "1"])

    assert e.value.code == 2
    assert "size" in capsys.readouterr().err


def test_main_plays_until_eof(monkeypatch, capsys) -> None:
    monkeypatch.setattr("builtins.input", scripted_input([]))

    assert main(["--seed", "3", "--no-color"]) == 0
    assert "Final Score: 0" in capsys.readouterr().out


def test_main_quits_on_q(monkeypatch, capsys) -> None:
    keys = ["a", "q", "d"]
    monkeypatch.setattr("builtins.input", lambda prompt: keys.pop(0))

    assert main(["--seed", "3", "--no-color"]) == 0

    assert keys == ["d"]
    assert "Final Score:" in capsys.readouterr().out
