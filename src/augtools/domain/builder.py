"""
Reference domain construction.

All input images are resampled onto one canonical grid before augmentation
so that augmentation parameters mean the same thing for every image. The
grid has a zero origin and identity direction, and is large enough along
each axis to hold the largest physical extent found among the inputs.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import SimpleITK as sitk

from augtools.coretypes import Direction, ImageGeometry, ReferenceDomain
from augtools.exceptions import DegenerateDomainError, DimensionMismatchError
from augtools.loggers import logger

__all__ = ["build_reference_domain", "union_physical_size", "as_geometry"]

DEFAULT_REFERENCE_SIZE = 128


def as_geometry(image: sitk.Image | ImageGeometry) -> ImageGeometry:
    if isinstance(image, ImageGeometry):
        return image
    return ImageGeometry.from_image(image)


def _common_dimension(geometries: Sequence[ImageGeometry]) -> int:
    dims = sorted({g.dimension for g in geometries})
    if len(dims) != 1:
        msg = f"All images must have the same dimension, got {dims}."
        raise DimensionMismatchError(msg)
    return dims[0]


def union_physical_size(geometries: Sequence[ImageGeometry]) -> np.ndarray:
    """Largest physical extent along each axis among `geometries`.

    Extents are measured along each image's own index axes. Images whose
    orientations differ are not projected onto a common frame; a warning is
    logged instead.
    """
    directions = {g.direction for g in geometries}
    if len(directions) > 1:
        logger.warning(
            "Input images have different orientations; the reference domain "
            "uses native-axis extents without projecting them.",
            directions=[repr(d) for d in directions],
        )
    return np.max([g.physical_extent for g in geometries], axis=0)


def build_reference_domain(
    images: Sequence[sitk.Image | ImageGeometry],
    size: int | Sequence[int] | None = None,
    isotropic_axis: int | None = None,
    isotropic_size: int | None = None,
) -> ReferenceDomain:
    """Compute the reference domain spanning a set of images.

    Two sizing modes are supported:

    - fixed size (default): `size` pixels per axis (int for all axes, or one
      value per axis, default 128) and
      ``spacing[i] = physical_size[i] / (size[i] - 1)``;
    - isotropic: `isotropic_size` pixels along `isotropic_axis` set one
      spacing shared by every axis, and the other sizes are rounded up so
      that ``(size[i] - 1) * spacing`` still covers ``physical_size[i]``.

    Parameters
    ----------
    images : Sequence[sitk.Image | ImageGeometry]
        Input images (only their geometry is read).
    size : int | Sequence[int] | None, optional
        Reference size for the fixed-size mode.
    isotropic_axis : int | None, optional
        Axis whose pixel count drives the isotropic mode.
    isotropic_size : int | None, optional
        Pixel count along `isotropic_axis`.

    Returns
    -------
    ReferenceDomain
        The grid, with `reference_center` at continuous index ``size / 2``.

    Raises
    ------
    DegenerateDomainError
        If `images` is empty, a requested size is smaller than 2, or the
        union extent is zero along an axis.
    DimensionMismatchError
        If the images do not all share one dimension.
    ValueError
        If both sizing modes, or an incomplete isotropic mode, are requested.
    """
    if len(images) == 0:
        raise DegenerateDomainError(
            "Cannot build a reference domain from an empty image collection."
        )

    geometries = [as_geometry(img) for img in images]
    dimension = _common_dimension(geometries)
    physical_size = union_physical_size(geometries)

    isotropic = isotropic_axis is not None or isotropic_size is not None
    if isotropic and size is not None:
        raise ValueError("Pass either `size` or the isotropic arguments, not both.")

    if isotropic:
        if isotropic_axis is None or isotropic_size is None:
            raise ValueError(
                "Isotropic mode needs both `isotropic_axis` and `isotropic_size`."
            )
        if not 0 <= isotropic_axis < dimension:
            msg = f"isotropic_axis {isotropic_axis} out of range for {dimension}D images."
            raise ValueError(msg)
        if isotropic_size < 2:
            msg = f"Reference size must be at least 2, got {isotropic_size}."
            raise DegenerateDomainError(msg)
        iso_spacing = physical_size[isotropic_axis] / (isotropic_size - 1)
        if iso_spacing <= 0:
            msg = f"Zero physical extent along isotropic axis {isotropic_axis}."
            raise DegenerateDomainError(msg)
        spacing = np.full(dimension, iso_spacing)
        reference_size = np.array(
            [math.ceil(phys / iso_spacing - 1e-9) + 1 for phys in physical_size]
        )
        reference_size[isotropic_axis] = isotropic_size
        if (reference_size < 2).any():
            msg = (
                f"Isotropic spacing {iso_spacing:.4g} leaves a single-pixel axis: "
                f"size {reference_size.tolist()} for physical size {physical_size.tolist()}."
            )
            raise DegenerateDomainError(msg)
    else:
        if size is None:
            size = DEFAULT_REFERENCE_SIZE
        reference_size = (
            np.full(dimension, size, dtype=int)
            if isinstance(size, (int, np.integer))
            else np.asarray(size, dtype=int)
        )
        if reference_size.shape != (dimension,):
            msg = f"Reference size {list(reference_size)} does not match {dimension}D images."
            raise DimensionMismatchError(msg)
        if (reference_size < 2).any():
            msg = f"Reference size must be at least 2 on every axis, got {reference_size.tolist()}."
            raise DegenerateDomainError(msg)
        spacing = physical_size / (reference_size - 1)

    if (spacing <= 0).any():
        msg = f"Images have zero physical extent along some axis: {physical_size.tolist()}."
        raise DegenerateDomainError(msg)

    domain = ReferenceDomain(
        size=tuple(int(s) for s in reference_size),
        spacing=tuple(spacing),
        origin=(0.0,) * dimension,
        direction=Direction.identity(dimension),
        physical_size=tuple(physical_size),
    )
    logger.debug(
        "Built reference domain",
        n_images=len(geometries),
        size=domain.size,
        spacing=domain.spacing,
        physical_size=domain.physical_size,
        reference_center=domain.reference_center,
    )
    return domain
