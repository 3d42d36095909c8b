from dataclasses import dataclass
from typing import NamedTuple

from . import CHANNEL_MAX, CHANNEL_MIN, OPAQUE_ALPHA


class Color(NamedTuple):
    """An 8-bit RGBA color. Opaque sources always carry alpha 255."""

    red: int
    green: int
    blue: int
    alpha: int = OPAQUE_ALPHA

    @classmethod
    def of(cls, red: int, green: int, blue: int, alpha: int = OPAQUE_ALPHA) -> "Color":
        """Build a color, rejecting channels outside [0, 255]."""
        for name, value in zip(cls._fields, (red, green, blue, alpha)):
            if not CHANNEL_MIN <= value <= CHANNEL_MAX:
                raise ValueError(f"{name} channel out of range: {value}")
        return cls(int(red), int(green), int(blue), int(alpha))

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.red, self.green, self.blue


@dataclass(frozen=True)
class Pixel:
    """A decoded image pixel at (x, y)."""

    x: int
    y: int
    color: Color
