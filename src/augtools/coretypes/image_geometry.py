"""
Geometry-only descriptions of sampling grids.

`ImageGeometry` captures the size, spacing, origin and direction of a
SimpleITK image without its pixel buffer. `ReferenceDomain` is the canonical
grid that every input image is resampled onto before augmentation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import SimpleITK as sitk

from .direction import Direction


@dataclass(frozen=True)
class ImageGeometry:
    """Sampling grid of an image.

    Attributes
    ----------
    size : tuple[int, ...]
        Number of pixels along each axis.
    spacing : tuple[float, ...]
        Physical distance between pixel centres along each axis.
    origin : tuple[float, ...]
        Physical position of the pixel at index zero.
    direction : Direction
        Orientation of the index axes in physical space.
    """

    size: tuple[int, ...]
    spacing: tuple[float, ...]
    origin: tuple[float, ...]
    direction: Direction

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", tuple(int(s) for s in self.size))
        object.__setattr__(
            self, "spacing", tuple(float(s) for s in self.spacing)
        )
        object.__setattr__(
            self, "origin", tuple(float(o) for o in self.origin)
        )
        if not isinstance(self.direction, Direction):
            object.__setattr__(self, "direction", Direction(self.direction))

        dims = {
            "size": len(self.size),
            "spacing": len(self.spacing),
            "origin": len(self.origin),
            "direction": self.direction.dimension,
        }
        if len(set(dims.values())) != 1:
            msg = f"Inconsistent geometry dimensions: {dims}"
            raise ValueError(msg)
        if any(s <= 0 for s in self.spacing):
            msg = f"Spacing must be positive, got {self.spacing}"
            raise ValueError(msg)

    @classmethod
    def from_image(cls, image: sitk.Image) -> ImageGeometry:
        return cls(
            size=image.GetSize(),
            spacing=image.GetSpacing(),
            origin=image.GetOrigin(),
            direction=Direction(image.GetDirection()),
        )

    @property
    def dimension(self) -> int:
        return len(self.size)

    @property
    def physical_extent(self) -> np.ndarray:
        """Real-world span of the grid along each index axis, ``(size-1)*spacing``."""
        return (np.array(self.size) - 1) * np.array(self.spacing)

    def continuous_index_to_physical(
        self, index: Sequence[float] | np.ndarray
    ) -> np.ndarray:
        """Map a (continuous) index to a physical point.

        Same mapping as ``sitk.Image.TransformContinuousIndexToPhysicalPoint``:
        ``origin + D @ (index * spacing)``.
        """
        scaled = np.asarray(index, dtype=np.float64) * np.array(self.spacing)
        return np.array(self.origin) + self.direction.to_numpy() @ scaled

    @property
    def center(self) -> np.ndarray:
        """Physical point at index ``size / 2``."""
        return self.continuous_index_to_physical(np.array(self.size) / 2.0)

    @property
    def midpoint(self) -> np.ndarray:
        """Physical point halfway between the first and last pixel centres."""
        return self.continuous_index_to_physical(
            (np.array(self.size) - 1) / 2.0
        )

    def to_image(self, pixel_id: int = sitk.sitkFloat32) -> sitk.Image:
        """Allocate an empty image on this grid, e.g. as a resampling reference."""
        image = sitk.Image(list(self.size), pixel_id)
        image.SetOrigin(self.origin)
        image.SetSpacing(self.spacing)
        image.SetDirection(tuple(self.direction))
        return image


@dataclass(frozen=True)
class ReferenceDomain(ImageGeometry):
    """Canonical grid spanning the union of a set of images.

    Origin is the zero vector and direction is the identity; `physical_size`
    holds the largest extent among the inputs along each axis.
    """

    physical_size: tuple[float, ...]

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(
            self, "physical_size", tuple(float(p) for p in self.physical_size)
        )

    @property
    def reference_origin(self) -> np.ndarray:
        return np.array(self.origin)

    @property
    def reference_center(self) -> np.ndarray:
        return self.center

    def __str__(self) -> str:
        spacing = ", ".join(f"{s:.4f}" for s in self.spacing)
        return (
            f"ReferenceDomain(size={self.size}, spacing=({spacing}), "
            f"physical_size={self.physical_size})"
        )
