from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from watermark_blender.processors.image import ImageRole, LoadedImage


def solid(width: int, height: int, color: tuple[int, ...]) -> np.ndarray:
    """Array of one color, shape (height, width, len(color))."""
    return np.full((height, width, len(color)), color, dtype=np.uint8)


def gradient(width: int, height: int, seed: int = 0) -> np.ndarray:
    """Deterministic noisy RGB test image."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


@pytest.fixture
def write_image(tmp_path: Path):
    """Save an array as an image file under tmp_path and return its path as str."""

    def _write(name: str, array: np.ndarray) -> str:
        path = tmp_path / name
        Image.fromarray(array).save(path)
        return str(path)

    return _write


@pytest.fixture
def make_loaded():
    """Build a LoadedImage straight from an RGB or RGBA array."""

    def _make(array: np.ndarray, role: ImageRole = ImageRole.BASE) -> LoadedImage:
        translucent = array.shape[2] == 4
        if not translucent:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        height, width = array.shape[:2]
        return LoadedImage(
            path=Path(f"{role.value}.png"),
            role=role,
            width=width,
            height=height,
            color_components=3,
            bit_depth=32 if translucent else 24,
            translucent=translucent,
            _rgba=array.astype(np.uint8),
        )

    return _make
