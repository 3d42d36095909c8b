import numpy as np
from numpy.typing import NDArray

from . import MAX_WEIGHT, MIN_WEIGHT
from .color import Color


def _check_weight(weight: int) -> None:
    if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
        raise ValueError(f"Blend weight must be in [{MIN_WEIGHT}, {MAX_WEIGHT}], got {weight}")


def blend_pixels(original: Color, mask: Color, weight: int) -> Color:
    """
    Blend a watermark color into a base color.

    Formula per channel: (weight * mask + (100 - weight) * original) // 100

    Args:
        original: Base image color
        mask: Watermark color
        weight: Percentage contribution of the watermark (0-100)

    Returns:
        Opaque blended color. Input alpha is never read.
    """
    _check_weight(weight)
    keep = MAX_WEIGHT - weight
    return Color(
        (weight * mask.red + keep * original.red) // MAX_WEIGHT,
        (weight * mask.green + keep * original.green) // MAX_WEIGHT,
        (weight * mask.blue + keep * original.blue) // MAX_WEIGHT,
    )


def blend_arrays(
    original: NDArray[np.uint8],
    mask: NDArray[np.uint8],
    weight: int,
) -> NDArray[np.uint8]:
    """
    Vectorized blend_pixels over arrays of shape (..., C) with C >= 3.

    Only the RGB channels are used. Integer arithmetic keeps the result
    bit-identical to blend_pixels.

    Returns:
        uint8 array of shape (..., 3)
    """
    _check_weight(weight)

    # Widen before multiplying, 100 * 255 overflows uint8
    base_rgb = original[..., :3].astype(np.int32)
    mask_rgb = mask[..., :3].astype(np.int32)

    blended = (weight * mask_rgb + (MAX_WEIGHT - weight) * base_rgb) // MAX_WEIGHT

    return blended.astype(np.uint8)
