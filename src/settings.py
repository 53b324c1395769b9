# settings.py
# Configuration surface consumed from the CLI (or any other caller).

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def is_power_of_two(value: int) -> bool:
    """True for 1, 2, 4, 8, ... (bools are not numbers here)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0 and value & (value - 1) == 0


class GameSettings(BaseModel):
    """Settings for one game session."""
    model_config = ConfigDict(frozen=True)

    size: int = Field(
        default=4,
        gt=1, # Board size must be at least 2x2
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    win_tile: int = Field(
        default=2048,
        gt=0,
        description="The tile value to achieve for winning the game (e.g., 2048)."
    )
    four_probability: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Probability that a spawned tile is a 4 instead of a 2."
    )
    history_capacity: int = Field(
        default=10,
        gt=0,
        description="Maximum number of moves that can be undone."
    )
    initial_tiles: int = Field(
        default=2,
        ge=0,
        description="Number of tiles spawned when a game (re)starts."
    )
    color: bool = Field(
        default=True,
        description="Whether the renderer may use colors. Ignored by the engine."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the tile spawner; None means nondeterministic."
    )

    @field_validator("win_tile")
    @classmethod
    def _win_tile_is_reachable(cls, value: int) -> int:
        if not is_power_of_two(value) or value < 4:
            raise ValueError("win_tile must be a power of 2 and at least 4.")
        return value

    @model_validator(mode="after")
    def _initial_tiles_fit(self) -> "GameSettings":
        if self.initial_tiles > self.size * self.size:
            raise ValueError(
                f"initial_tiles ({self.initial_tiles}) cannot exceed the number of cells ({self.size * self.size})."
            )
        return self
