"""Image conversion and timing helpers."""

from .imageutils import (
    ImageArrayMetadata,
    array_to_image,
    cast_like,
    image_to_array,
)
from .timer_utils import TimerContext, timed_context, timer

__all__ = [
    "ImageArrayMetadata",
    "array_to_image",
    "cast_like",
    "image_to_array",
    "TimerContext",
    "timed_context",
    "timer",
]
