from __future__ import annotations

from typing import Sequence

import numpy as np
import SimpleITK as sitk

from augtools.coretypes import ImageGeometry
from augtools.exceptions import DimensionMismatchError

from .chain import TransformChain

INTERPOLATORS = {
    "linear": sitk.sitkLinear,
    "nearest": sitk.sitkNearestNeighbor,
    "bspline": sitk.sitkBSpline,
}

__all__ = [
    "INTERPOLATORS",
    "get_interpolator",
    "resample_to_reference",
    "flip_by_slicing",
    "physical_points",
]


def get_interpolator(interpolation: str) -> int:
    """Look up the SimpleITK interpolator for a name.

    Raises
    ------
    ValueError
        If the interpolation method is not supported.
    """
    try:
        return INTERPOLATORS[interpolation]
    except KeyError as ke:
        msg = f"interpolator must be one of {list(INTERPOLATORS.keys())}, got {interpolation}."
        raise ValueError(msg) from ke


def resample_to_reference(
    image: sitk.Image,
    reference: ImageGeometry | sitk.Image,
    transform: TransformChain | sitk.Transform | None = None,
    interpolation: str = "linear",
    default_value: float = 0.0,
) -> sitk.Image:
    """Resample an image onto a reference grid through a transform.

    Every output pixel centre on the reference grid is mapped through
    `transform` into the physical space of `image`, where the input is
    interpolated. Points falling outside the input receive `default_value`.

    Parameters
    ----------
    image : sitk.Image
        The image to resample.
    reference : ImageGeometry | sitk.Image
        Output grid (size, spacing, origin, direction).
    transform : TransformChain | sitk.Transform | None, optional
        Mapping from output-grid physical points to input physical points.
        Identity if None.
    interpolation : str, optional
        "linear" (default), "nearest" (use for label images) or "bspline".
    default_value : float, optional
        Fill value for points outside the input image.

    Returns
    -------
    sitk.Image
        Image on the reference grid, with the pixel type of `image`.
    """
    interpolator = get_interpolator(interpolation)
    if isinstance(reference, sitk.Image):
        reference = ImageGeometry.from_image(reference)

    if reference.dimension != image.GetDimension():
        msg = (
            f"Cannot resample a {image.GetDimension()}D image onto a "
            f"{reference.dimension}D grid."
        )
        raise DimensionMismatchError(msg)

    rif = sitk.ResampleImageFilter()
    rif.SetSize([int(s) for s in reference.size])
    rif.SetOutputOrigin(reference.origin)
    rif.SetOutputSpacing(reference.spacing)
    rif.SetOutputDirection(tuple(reference.direction))
    rif.SetOutputPixelType(image.GetPixelID())
    rif.SetDefaultPixelValue(float(default_value))
    rif.SetInterpolator(interpolator)

    if isinstance(transform, TransformChain):
        rif.SetTransform(transform.to_sitk())
    elif transform is not None:
        rif.SetTransform(transform)

    return rif.Execute(image)


def flip_by_slicing(image: sitk.Image, axes: Sequence[int]) -> sitk.Image:
    """Reverse the pixel order along `axes` using image slicing.

    Only the pixel content is flipped; SimpleITK adjusts the origin and
    direction of the result so it is not on the input grid anymore.
    """
    dimension = image.GetDimension()
    for axis in axes:
        if not 0 <= axis < dimension:
            msg = f"Axis {axis} out of range for a {dimension}D image."
            raise ValueError(msg)
    slices = tuple(
        slice(None, None, -1) if axis in axes else slice(None)
        for axis in range(dimension)
    )
    return image[slices]


def physical_points(image: sitk.Image) -> np.ndarray:
    """Physical coordinates of every pixel, shaped ``[z,] y, x, dim``."""
    points = sitk.PhysicalPointSource(
        sitk.sitkVectorFloat64,
        image.GetSize(),
        image.GetOrigin(),
        image.GetSpacing(),
        image.GetDirection(),
    )
    return sitk.GetArrayFromImage(points)
