import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from ..core import REQUIRED_COLOR_COMPONENTS, SUPPORTED_BIT_DEPTHS
from ..core.color import Color, Pixel
from ..errors import (
    ImageNotFoundError,
    InvalidExtensionError,
    OutputWriteError,
    UnreadableImageError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

# Output extension -> Pillow format name
OUTPUT_FORMATS = {".jpg": "JPEG", ".png": "PNG"}
SUPPORTED_OUTPUT_FORMATS = set(OUTPUT_FORMATS)
INVALID_EXTENSION_MESSAGE = 'The output file extension isn\'t "jpg" or "png".'

# Pillow mode -> (color components excluding alpha, bits per pixel)
_MODE_FORMATS: dict[str, tuple[int, int]] = {
    "1": (1, 1),
    "L": (1, 8),
    "LA": (1, 16),
    "P": (3, 8),
    "PA": (3, 16),
    "I;16": (1, 16),
    "I": (1, 32),
    "F": (1, 32),
    "RGB": (3, 24),
    "RGBA": (3, 32),
    "YCbCr": (3, 24),
    "LAB": (3, 24),
    "HSV": (3, 24),
    "CMYK": (4, 32),
}

# Modes Pillow narrows to 8 bits per channel on decode
_WIDE_MODES = {"RGB", "RGBA"}


class ImageRole(Enum):
    """What a loaded image is used for. The value is used in diagnostics."""

    BASE = "image"
    WATERMARK = "watermark"


def describe_mode(mode: str) -> tuple[int, int]:
    """Color component count and bit depth for a Pillow image mode."""
    if mode in _MODE_FORMATS:
        return _MODE_FORMATS[mode]
    bands = Image.getmodebands(mode)
    return bands, 8 * bands


def _raw_mode(img: Image.Image) -> str | None:
    """Decoder raw mode, e.g. "RGB;16B". Only available before load()."""
    if not img.tile:
        return None
    args = img.tile[0][3]
    if isinstance(args, tuple):
        args = args[0] if args else None
    return args if isinstance(args, str) else None


def describe_image(img: Image.Image) -> tuple[int, int]:
    """
    Color component count and bit depth of an opened, not yet loaded image.

    Pillow decodes 16-bit-per-channel RGB(A) into 8-bit "RGB"/"RGBA", so the
    stored depth comes from the decoder raw mode.
    """
    components, bit_depth = describe_mode(img.mode)
    raw_mode = _raw_mode(img)
    if img.mode in _WIDE_MODES and raw_mode and ";16" in raw_mode:
        bit_depth *= 2
    return components, bit_depth


@dataclass(frozen=True)
class LoadedImage:
    """A decoded, validated image. Pixel data is held as a read-only RGBA array."""

    path: Path
    role: ImageRole
    width: int
    height: int
    color_components: int
    bit_depth: int
    translucent: bool
    _rgba: NDArray[np.uint8] = field(repr=False, compare=False)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def get_pixel(self, x: int, y: int) -> Color:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} {self.role.value}")
        r, g, b, a = (int(c) for c in self._rgba[y, x])
        return Color(r, g, b, a)

    def pixels(self) -> Iterator[Pixel]:
        """Enumerate pixels row by row. Each call starts over."""
        for y in range(self.height):
            for x in range(self.width):
                yield Pixel(x, y, self.get_pixel(x, y))

    def to_array(self) -> NDArray[np.uint8]:
        return self._rgba


def _to_rgba(img: Image.Image) -> NDArray[np.uint8]:
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGB")
    # Opaque images get alpha 255
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    rgba = np.array(img, dtype=np.uint8)
    rgba.setflags(write=False)
    return rgba


def load_image(path: str | Path, role: ImageRole) -> LoadedImage:
    """
    Decode and validate an image file.

    Args:
        path: Image file path
        role: Base image or watermark, used in error messages

    Returns:
        LoadedImage with RGBA pixel data

    Raises:
        ImageNotFoundError: path is not an existing file
        UnreadableImageError: file is not an image Pillow can decode
        UnsupportedFormatError: not 3 color components, or not 24/32-bit
    """
    name = str(path)
    path = Path(path)
    if not path.is_file():
        raise ImageNotFoundError(f"The file {name} doesn't exist.")

    try:
        with Image.open(path) as img:
            components, bit_depth = describe_image(img)
            img.load()

            if components != REQUIRED_COLOR_COMPONENTS:
                raise UnsupportedFormatError(
                    f"The number of {role.value} color components isn't {REQUIRED_COLOR_COMPONENTS}."
                )
            if bit_depth not in SUPPORTED_BIT_DEPTHS:
                raise UnsupportedFormatError(f"The {role.value} isn't 24 or 32-bit.")

            translucent = "A" in img.getbands()
            rgba = _to_rgba(img)
    except OSError as e:
        raise UnreadableImageError(f"The file {name} isn't a readable image.") from e

    height, width = rgba.shape[:2]
    logger.debug(
        "Loaded %s %s: %dx%d, mode %s, %d-bit",
        role.value,
        name,
        width,
        height,
        img.mode,
        bit_depth,
    )

    return LoadedImage(
        path=path,
        role=role,
        width=width,
        height=height,
        color_components=components,
        bit_depth=bit_depth,
        translucent=translucent,
        _rgba=rgba,
    )


def is_supported_output(path: str | Path) -> bool:
    """Check if the filename ends in an extension we can encode to."""
    return any(str(path).endswith(ext) for ext in OUTPUT_FORMATS)


def output_format(path: str | Path) -> str:
    """Pillow format name for an output filename."""
    for ext, fmt in OUTPUT_FORMATS.items():
        if str(path).endswith(ext):
            return fmt
    raise InvalidExtensionError(INVALID_EXTENSION_MESSAGE)


def save_image(grid: NDArray[np.uint8], output_path: str | Path) -> Path:
    """
    Encode an RGB grid to disk.

    Args:
        grid: uint8 array of shape (height, width, 3)
        output_path: Destination, format chosen from its extension

    Returns:
        Path to the output file

    Raises:
        InvalidExtensionError: not a .jpg or .png filename
        OutputWriteError: the file could not be written
    """
    fmt = output_format(output_path)
    name = str(output_path)
    output_path = Path(output_path)

    result_image = Image.fromarray(np.ascontiguousarray(grid, dtype=np.uint8))
    try:
        result_image.save(output_path, format=fmt, quality=95)
    except OSError as e:
        raise OutputWriteError(f"The watermarked image {name} can't be written.") from e

    logger.debug("Saved %s as %s", output_path, fmt)
    return output_path
