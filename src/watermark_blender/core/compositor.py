"""Composition of a watermark over a base image."""

import logging
from collections.abc import Callable
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from ..errors import CompositionError
from .blend import blend_arrays, blend_pixels
from .color import Color
from .position import Placement
from .transparency import TransparencyFilter

logger = logging.getLogger(__name__)

ArrayBlend = Callable[[NDArray[np.uint8], NDArray[np.uint8], int], NDArray[np.uint8]]


class PixelSource(Protocol):
    """Decoded image the compositor can read from."""

    width: int
    height: int

    def get_pixel(self, x: int, y: int) -> Color: ...

    def to_array(self) -> NDArray[np.uint8]: ...


def composite_pixel(
    base: PixelSource,
    watermark: PixelSource,
    placement: Placement,
    transparency: TransparencyFilter,
    weight: int,
    x: int,
    y: int,
) -> Color:
    """
    Output color for a single base coordinate.

    Base color is kept when the placement does not map (x, y) or the
    transparency filter skips the watermark pixel; otherwise both are blended.
    """
    original = base.get_pixel(x, y)
    target = placement.locate(x, y)
    if target is None:
        return original

    try:
        mask = watermark.get_pixel(*target)
    except IndexError as e:
        raise CompositionError(f"No watermark pixel at {target} for base pixel ({x}, {y})") from e

    if transparency.passes_through(mask):
        return original
    return blend_pixels(original, mask, weight)


def compose(
    base: PixelSource,
    watermark: PixelSource,
    placement: Placement,
    transparency: TransparencyFilter,
    weight: int,
    blend: ArrayBlend = blend_arrays,
) -> NDArray[np.uint8]:
    """
    Blend the watermark over every pixel of the base image.

    Same rule as composite_pixel, applied to the whole image at once.

    Args:
        base: Base image
        watermark: Watermark image
        placement: Maps base coordinates to watermark coordinates
        transparency: Decides which watermark pixels are skipped
        weight: Watermark contribution in percent (0-100)
        blend: Array blend function

    Returns:
        uint8 RGB array of shape (base.height, base.width, 3)
    """
    base_rgba = base.to_array()
    watermark_rgba = watermark.to_array()

    # Output starts as a copy of the base, pass-through pixels are never rewritten
    output = np.array(base_rgba[..., :3], dtype=np.uint8, copy=True)

    mask, wm_x, wm_y = placement.coverage(base.width, base.height)
    wm_x = wm_x[mask]
    wm_y = wm_y[mask]

    if wm_x.size and (
        wm_x.min() < 0
        or wm_y.min() < 0
        or wm_x.max() >= watermark.width
        or wm_y.max() >= watermark.height
    ):
        raise CompositionError(
            f"Placement {placement} maps outside the {watermark.width}x{watermark.height} watermark"
        )

    mask_pixels = watermark_rgba[wm_y, wm_x]
    skip = transparency.passes_through_array(mask_pixels)

    # Coordinates that are placed and not filtered out
    ys, xs = np.nonzero(mask)
    keep = ~skip
    ys, xs = ys[keep], xs[keep]

    output[ys, xs] = blend(base_rgba[ys, xs], mask_pixels[keep], weight)

    logger.debug(
        "Composed %dx%d image: %d blended, %d skipped by %s filter",
        base.width,
        base.height,
        int(keep.sum()),
        int(skip.sum()),
        transparency.mode.value,
    )

    return output
