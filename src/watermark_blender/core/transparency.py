from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from . import TRANSPARENT_ALPHA
from .color import Color


class TransparencyMode(Enum):
    """Rule for skipping watermark pixels."""

    NONE = "none"
    ALPHA = "alpha"
    COLOR_KEY = "color_key"


@dataclass(frozen=True)
class TransparencyFilter:
    """
    Decides whether a watermark pixel leaves the base pixel untouched.

    ALPHA skips fully transparent watermark pixels, COLOR_KEY skips pixels
    whose RGB equals the key color.
    """

    mode: TransparencyMode = TransparencyMode.NONE
    key: Color | None = None

    def __post_init__(self):
        if self.mode is TransparencyMode.COLOR_KEY and self.key is None:
            raise ValueError("COLOR_KEY transparency requires a key color")

    @classmethod
    def for_watermark(
        cls,
        translucent: bool,
        use_alpha: bool = False,
        key: Color | None = None,
    ) -> "TransparencyFilter":
        """
        Pick the filter allowed for a watermark.

        Alpha filtering only applies to translucent watermarks and color keys
        only to opaque ones; the other option is ignored.
        """
        if translucent:
            return cls(TransparencyMode.ALPHA) if use_alpha else cls()
        if key is not None:
            return cls(TransparencyMode.COLOR_KEY, key)
        return cls()

    def passes_through(self, color: Color) -> bool:
        if self.mode is TransparencyMode.ALPHA:
            return color.alpha == TRANSPARENT_ALPHA
        if self.mode is TransparencyMode.COLOR_KEY:
            return color.rgb == self.key.rgb
        return False

    def passes_through_array(self, rgba: NDArray[np.uint8]) -> NDArray[np.bool_]:
        """Vectorized passes_through over an (..., 4) RGBA array."""
        if self.mode is TransparencyMode.ALPHA:
            return rgba[..., 3] == TRANSPARENT_ALPHA
        if self.mode is TransparencyMode.COLOR_KEY:
            key = np.array(self.key.rgb, dtype=np.uint8)
            return np.all(rgba[..., :3] == key, axis=-1)
        return np.zeros(rgba.shape[:-1], dtype=np.bool_)
