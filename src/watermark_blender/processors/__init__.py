from .image import (
    SUPPORTED_OUTPUT_FORMATS,
    ImageRole,
    LoadedImage,
    is_supported_output,
    load_image,
    save_image,
)

__all__ = [
    "load_image",
    "save_image",
    "is_supported_output",
    "ImageRole",
    "LoadedImage",
    "SUPPORTED_OUTPUT_FORMATS",
]
