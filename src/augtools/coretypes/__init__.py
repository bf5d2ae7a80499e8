from .direction import Direction
from .image_geometry import ImageGeometry, ReferenceDomain

__all__ = [
    "Direction",
    "ImageGeometry",
    "ReferenceDomain",
]
