from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray


class PlacementMode(str, Enum):
    """How the watermark is laid over the base image."""

    SINGLE = "single"
    GRID = "grid"


# (mask, watermark_x, watermark_y); index arrays are only meaningful where mask is True
Coverage = tuple[NDArray[np.bool_], NDArray[np.intp], NDArray[np.intp]]


def max_offset(base_size: tuple[int, int], watermark_size: tuple[int, int]) -> tuple[int, int]:
    """Largest SINGLE offset that keeps the watermark inside the base image."""
    (base_w, base_h), (wm_w, wm_h) = base_size, watermark_size
    return base_w - wm_w, base_h - wm_h


def _coordinate_grid(width: int, height: int) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    ys, xs = np.mgrid[0:height, 0:width]
    return xs.astype(np.intp), ys.astype(np.intp)


@dataclass(frozen=True)
class SinglePlacement:
    """Watermark drawn once with its top-left corner at (offset_x, offset_y)."""

    offset_x: int
    offset_y: int
    watermark_width: int
    watermark_height: int

    mode = PlacementMode.SINGLE

    def contains(self, x: int, y: int) -> bool:
        return (
            self.offset_x <= x < self.offset_x + self.watermark_width
            and self.offset_y <= y < self.offset_y + self.watermark_height
        )

    def locate(self, x: int, y: int) -> tuple[int, int] | None:
        """Watermark coordinate for base (x, y), or None outside the placement rectangle."""
        if not self.contains(x, y):
            return None
        return x - self.offset_x, y - self.offset_y

    def coverage(self, width: int, height: int) -> Coverage:
        xs, ys = _coordinate_grid(width, height)
        wm_x = xs - self.offset_x
        wm_y = ys - self.offset_y
        mask = (
            (wm_x >= 0)
            & (wm_x < self.watermark_width)
            & (wm_y >= 0)
            & (wm_y < self.watermark_height)
        )
        return mask, wm_x, wm_y


@dataclass(frozen=True)
class GridPlacement:
    """Watermark tiled across the whole base image starting at (0, 0)."""

    watermark_width: int
    watermark_height: int

    mode = PlacementMode.GRID

    def contains(self, x: int, y: int) -> bool:
        return True

    def locate(self, x: int, y: int) -> tuple[int, int]:
        return x % self.watermark_width, y % self.watermark_height

    def coverage(self, width: int, height: int) -> Coverage:
        xs, ys = _coordinate_grid(width, height)
        mask = np.ones((height, width), dtype=np.bool_)
        return mask, xs % self.watermark_width, ys % self.watermark_height


Placement = SinglePlacement | GridPlacement


def create_placement(
    mode: PlacementMode,
    watermark_size: tuple[int, int],
    offset: tuple[int, int] = (0, 0),
) -> Placement:
    """
    Build the placement strategy for a run.

    Args:
        mode: SINGLE or GRID
        watermark_size: (width, height) of the watermark
        offset: Top-left corner for SINGLE, ignored for GRID

    Returns:
        Placement strategy
    """
    wm_w, wm_h = watermark_size
    if wm_w <= 0 or wm_h <= 0:
        raise ValueError(f"Watermark must have a positive size, got {watermark_size}")

    if mode is PlacementMode.SINGLE:
        x, y = offset
        return SinglePlacement(offset_x=x, offset_y=y, watermark_width=wm_w, watermark_height=wm_h)

    return GridPlacement(watermark_width=wm_w, watermark_height=wm_h)
