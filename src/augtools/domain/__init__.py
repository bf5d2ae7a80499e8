from .builder import DEFAULT_REFERENCE_SIZE, build_reference_domain, union_physical_size
from .composer import (
    build_centered_transform,
    build_orientation_transform,
    build_reflected_transform,
)

__all__ = [
    "DEFAULT_REFERENCE_SIZE",
    "build_reference_domain",
    "union_physical_size",
    "build_orientation_transform",
    "build_centered_transform",
    "build_reflected_transform",
]
