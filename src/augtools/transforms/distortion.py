from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import SimpleITK as sitk

from augtools.utils import array_to_image

from .base_transform import BaseTransform
from .functional import physical_points, resample_to_reference

__all__ = ["radial_distortion_field", "radial_distort", "RadialDistortion"]


def radial_distortion_field(
    image: sitk.Image,
    k1: float,
    k2: float = 0.0,
    k3: float = 0.0,
    distortion_center: Sequence[float] | None = None,
) -> sitk.DisplacementFieldTransform:
    """Displacement field transform for polynomial radial distortion.

    Every physical point ``p`` is displaced by
    ``(k1 r^2 + k2 r^4 + k3 r^6) (p - c)`` with ``r = |p - c|``.

    Parameters
    ----------
    image : sitk.Image
        Defines the grid the displacement field is sampled on.
    k1, k2, k3 : float
        Radial distortion coefficients.
    distortion_center : Sequence[float] | None, optional
        Physical centre of the distortion. Defaults to the image centre
        (continuous index ``size / 2``).
    """
    if distortion_center is None:
        distortion_center = image.TransformContinuousIndexToPhysicalPoint(
            [sz / 2.0 for sz in image.GetSize()]
        )
    c = np.asarray(distortion_center, dtype=np.float64)
    if c.size != image.GetDimension():
        msg = (
            f"Distortion centre has {c.size} coordinates, "
            f"image is {image.GetDimension()}D."
        )
        raise ValueError(msg)

    delta = physical_points(image) - c
    r2 = np.sum(delta**2, axis=-1, keepdims=True)
    displacement = (k1 * r2 + k2 * r2**2 + k3 * r2**3) * delta

    field = array_to_image(
        displacement.astype(np.float64), reference_image=image, is_vector=True
    )
    return sitk.DisplacementFieldTransform(field)


def radial_distort(
    image: sitk.Image,
    k1: float,
    k2: float = 0.0,
    k3: float = 0.0,
    distortion_center: Sequence[float] | None = None,
    interpolation: str = "linear",
    default_value: float = 0.0,
) -> sitk.Image:
    """Apply radial (barrel / pincushion) distortion, keeping the input grid.

    Positive coefficients sample from farther out than the output pixel,
    compressing content towards the centre; negative ones stretch it.
    """
    transform = radial_distortion_field(image, k1, k2, k3, distortion_center)
    return resample_to_reference(
        image,
        image,
        transform,
        interpolation=interpolation,
        default_value=default_value,
    )


@dataclass
class RadialDistortion(BaseTransform):
    """RadialDistortion operation class.

    Parameters
    ----------
    k1, k2, k3 : float
        Radial distortion coefficients.
    distortion_center : list[float] | None
        Physical centre of the distortion, the image centre when None.
    interpolation : str, optional
        "linear" (default), "nearest" or "bspline".
    """

    k1: float
    k2: float = 0.0
    k3: float = 0.0
    distortion_center: list[float] | None = None
    interpolation: str = "linear"

    def __call__(self, image: sitk.Image) -> sitk.Image:
        return radial_distort(
            image,
            self.k1,
            self.k2,
            self.k3,
            distortion_center=self.distortion_center,
            interpolation=self.interpolation,
        )
