import struct
import zlib
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from conftest import gradient, solid
from watermark_blender.core.color import Color, Pixel
from watermark_blender.errors import (
    ErrorKind,
    ImageNotFoundError,
    InvalidExtensionError,
    OutputWriteError,
    UnreadableImageError,
    UnsupportedFormatError,
)
from watermark_blender.processors.image import (
    ImageRole,
    describe_mode,
    is_supported_output,
    load_image,
    save_image,
)


def test_load_rgb(write_image):
    path = write_image("base.png", solid(3, 2, (1, 2, 3)))

    image = load_image(path, ImageRole.BASE)

    assert image.size == (3, 2)
    assert image.bit_depth == 24
    assert image.color_components == 3
    assert not image.translucent
    assert image.get_pixel(2, 1) == Color(1, 2, 3, 255)


def test_load_rgba(write_image):
    path = write_image("mark.png", solid(2, 2, (9, 8, 7, 0)))

    image = load_image(path, ImageRole.WATERMARK)

    assert image.bit_depth == 32
    assert image.translucent
    assert image.get_pixel(0, 0) == Color(9, 8, 7, 0)


def test_missing_file(tmp_path):
    name = str(tmp_path / "nope.png")

    with pytest.raises(ImageNotFoundError) as exc_info:
        load_image(name, ImageRole.BASE)

    assert exc_info.value.message == f"The file {name} doesn't exist."
    assert exc_info.value.kind is ErrorKind.FILE_NOT_FOUND


def test_grayscale_has_wrong_component_count(tmp_path):
    path = tmp_path / "gray.png"
    Image.new("L", (2, 2)).save(path)

    with pytest.raises(UnsupportedFormatError, match="The number of watermark color components isn't 3."):
        load_image(path, ImageRole.WATERMARK)


def test_palette_has_wrong_bit_depth(tmp_path):
    path = tmp_path / "palette.png"
    Image.new("P", (2, 2)).save(path)

    with pytest.raises(UnsupportedFormatError, match="The image isn't 24 or 32-bit."):
        load_image(path, ImageRole.BASE)


def write_16bit_png(path: Path, color_type: int, channels: int) -> None:
    """Write a 2x2 PNG with 16 bits per sample."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    row = b"\x00" + b"\x12\x34" * channels * 2
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", 2, 2, 16, color_type, 0, 0, 0))
        + chunk(b"IDAT", zlib.compress(row * 2))
        + chunk(b"IEND", b"")
    )


@pytest.mark.parametrize("color_type,channels,role", [(2, 3, ImageRole.BASE), (6, 4, ImageRole.WATERMARK)])
def test_16bit_per_channel_is_rejected(tmp_path, color_type, channels, role):
    path = tmp_path / "deep.png"
    write_16bit_png(path, color_type, channels)

    with pytest.raises(UnsupportedFormatError, match=f"The {role.value} isn't 24 or 32-bit."):
        load_image(path, role)


def test_not_an_image(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("not pixels")

    with pytest.raises(UnreadableImageError):
        load_image(path, ImageRole.BASE)


def test_describe_mode():
    assert describe_mode("RGB") == (3, 24)
    assert describe_mode("RGBA") == (3, 32)
    assert describe_mode("L") == (1, 8)


def test_pixels_are_row_major_and_restartable(write_image):
    array = gradient(3, 2)
    image = load_image(write_image("g.png", array), ImageRole.BASE)

    first = list(image.pixels())
    second = list(image.pixels())

    assert first == second
    assert [(p.x, p.y) for p in first] == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]
    assert first[4] == Pixel(1, 1, Color(*(int(c) for c in array[1, 1])))


@pytest.mark.parametrize("xy", [(-1, 0), (0, -1), (3, 0), (0, 2)])
def test_get_pixel_out_of_range(write_image, xy):
    image = load_image(write_image("g.png", gradient(3, 2)), ImageRole.BASE)

    with pytest.raises(IndexError):
        image.get_pixel(*xy)


def test_pixel_data_is_read_only(write_image):
    image = load_image(write_image("g.png", gradient(3, 2)), ImageRole.BASE)

    with pytest.raises(ValueError):
        image.to_array()[0, 0, 0] = 1


def test_png_round_trip(tmp_path, write_image):
    array = gradient(5, 4)
    output = save_image(array, tmp_path / "out.png")

    reloaded = load_image(output, ImageRole.BASE)

    assert np.array_equal(reloaded.to_array()[..., :3], array)


def test_save_jpg(tmp_path):
    output = save_image(solid(4, 4, (200, 100, 50)), str(tmp_path / "out.jpg"))

    with Image.open(output) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"


def test_save_rejects_other_extensions(tmp_path):
    target = tmp_path / "out.bmp"

    with pytest.raises(InvalidExtensionError, match='isn\'t "jpg" or "png"'):
        save_image(solid(2, 2, (0, 0, 0)), target)

    assert not target.exists()


@pytest.mark.parametrize(
    "name,supported",
    [("a.png", True), ("a.jpg", True), ("dir/a.b.png", True), ("a.jpeg", False), ("a.PNG", False), ("png", False)],
)
def test_is_supported_output(name, supported):
    assert is_supported_output(Path(name)) is supported


def test_save_into_missing_directory(tmp_path):
    target = str(tmp_path / "missing" / "out.png")

    with pytest.raises(OutputWriteError) as exc_info:
        save_image(solid(2, 2, (0, 0, 0)), target)

    assert exc_info.value.message == f"The watermarked image {target} can't be written."
