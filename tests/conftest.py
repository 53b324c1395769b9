from __future__ import annotations

from typing import Iterable, Sequence

import pytest


class ScriptedRng:
    """Stand-in for random.Random that replays fixed choices.

    `picks` are indices into the sequence handed to `choice`; `rolls` are the
    values returned by `random`. Once a script runs out it falls back to the
    first candidate and a roll of 0.5 (which spawns a 2 at the default odds).
    """

    def __init__(self, picks: Iterable[int] = (), rolls: Iterable[float] = ()) -> None:
        self.picks = list(picks)
        self.rolls = list(rolls)
        self.choices_seen: list[Sequence] = []

    def choice(self, seq: Sequence):
        self.choices_seen.append(list(seq))
        index = self.picks.pop(0) if self.picks else 0
        return seq[index]

    def random(self) -> float:
        return self.rolls.pop(0) if self.rolls else 0.5


@pytest.fixture()
def scripted_rng():
    """Factory fixture: `scripted_rng(picks=[...], rolls=[...])`."""

    def _make(picks: Iterable[int] = (), rolls: Iterable[float] = ()) -> ScriptedRng:
        return ScriptedRng(picks=picks, rolls=rolls)

    return _make
