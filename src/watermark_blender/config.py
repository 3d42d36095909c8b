"""
Parsing and validation of the answers that configure a blend run.

Each parser takes the raw text the user typed and either returns the parsed
value or raises a WatermarkError subclass carrying the diagnostic to show.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from .core import MAX_WEIGHT, MIN_WEIGHT
from .core.color import Color
from .core.position import Placement, PlacementMode, create_placement, max_offset
from .core.transparency import TransparencyFilter
from .errors import (
    DimensionMismatchError,
    InvalidExtensionError,
    InvalidInputError,
    InvalidPlacementError,
)
from .processors.image import INVALID_EXTENSION_MESSAGE, LoadedImage, is_supported_output

# ASCII decimal integers only; int() also takes digit separators like "5_0"
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class BlendJob:
    """A fully validated blend run, ready to compose."""

    base: LoadedImage
    watermark: LoadedImage
    transparency: TransparencyFilter
    weight: int
    placement: Placement
    output_path: Path
    output_name: str  # As typed, for messages


def _parse_int(token: str) -> int | None:
    if not _INTEGER.fullmatch(token):
        return None
    return int(token)


def _parse_ints(text: str) -> list[int] | None:
    values = [_parse_int(part) for part in text.split()]
    if None in values:
        return None
    return values


def parse_yes_no(text: str) -> bool:
    """Only "yes" (any case) counts as yes."""
    return text.strip().lower() == "yes"


def parse_transparency_color(text: str) -> Color:
    """Parse "R G B" into an opaque key color."""
    values = _parse_ints(text)
    if values is None or len(values) != 3:
        raise InvalidInputError("The transparency color input is invalid.")
    try:
        return Color.of(*values)
    except ValueError:
        raise InvalidInputError("The transparency color input is invalid.") from None


def parse_weight(text: str) -> int:
    weight = _parse_int(text.strip())
    if weight is None:
        raise InvalidInputError("The transparency percentage isn't an integer number.")

    if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
        raise InvalidInputError("The transparency percentage is out of range.")
    return weight


def parse_placement_method(text: str) -> PlacementMode:
    try:
        return PlacementMode(text.strip().lower())
    except ValueError:
        raise InvalidPlacementError("The position method input is invalid.") from None


def parse_position(text: str, limit: tuple[int, int]) -> tuple[int, int]:
    """
    Parse "x y" for SINGLE placement.

    Args:
        text: Raw answer
        limit: Largest allowed (x, y), inclusive

    Returns:
        (x, y) offset
    """
    values = _parse_ints(text)
    if values is None or len(values) != 2:
        raise InvalidInputError("The position input is invalid.")

    x, y = values
    max_x, max_y = limit
    if not (0 <= x <= max_x and 0 <= y <= max_y):
        raise InvalidInputError("The position input is out of range.")
    return x, y


def validate_dimensions(base: LoadedImage, watermark: LoadedImage) -> None:
    if watermark.width > base.width or watermark.height > base.height:
        raise DimensionMismatchError("The watermark's dimensions are larger.")


def validate_output_path(text: str) -> Path:
    """Accept only .jpg and .png output filenames."""
    name = text.strip()
    if not is_supported_output(name):
        raise InvalidExtensionError(INVALID_EXTENSION_MESSAGE)
    return Path(name)


def position_limit(base: LoadedImage, watermark: LoadedImage) -> tuple[int, int]:
    return max_offset(base.size, watermark.size)


def build_placement(
    mode: PlacementMode,
    watermark: LoadedImage,
    offset: tuple[int, int] = (0, 0),
) -> Placement:
    return create_placement(mode, watermark.size, offset)
