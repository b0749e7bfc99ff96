"""Colour themes and their alarm sounds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

RGB = Tuple[int, int, int]


class InvalidThemeError(ValueError):
    """Raised when a theme index does not name a predefined theme."""


@dataclass(frozen=True)
class Theme:
    """A palette for the display plus the sound played by its alarm."""

    name: str
    background: RGB
    on_color: RGB
    off_color: RGB
    sound_id: str


THEMES: tuple[Theme, ...] = (
    Theme("standard", (102, 102, 102), (255, 0, 0), (128, 128, 128), "StandardAlarm.wav"),
    Theme("ocean", (19, 79, 92), (243, 243, 243), (42, 109, 120), "OceanSound.wav"),
    Theme("playful", (103, 78, 167), (222, 7, 230), (131, 102, 173), "Temptation.wav"),
    Theme("regal", (51, 42, 18), (199, 152, 56), (105, 100, 86), "LonelyNoMore.wav"),
    Theme("striking", (0, 0, 0), (0, 255, 0), (38, 4, 2), "ElectricFeel.wav"),
)


def get_theme(index: int) -> Theme:
    """Return the theme at *index* (0--4).

    Raises ``TypeError`` for a non-integer index and ``InvalidThemeError``
    for one outside the table.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"theme must be an integer, got {type(index).__name__}")
    if not (0 <= index < len(THEMES)):
        raise InvalidThemeError(
            f"theme must be between 0 and {len(THEMES) - 1}, got {index}"
        )
    return THEMES[index]
