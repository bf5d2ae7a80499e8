from .readers import read_image, read_images
from .writers import (
    ExistingFileMode,
    ImageWriter,
    ImageWriterError,
    ImageWriterValidationError,
)

__all__ = [
    "read_image",
    "read_images",
    "ExistingFileMode",
    "ImageWriter",
    "ImageWriterError",
    "ImageWriterValidationError",
]
