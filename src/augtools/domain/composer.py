"""
Per-image transform chains mapping the reference domain into native space.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import SimpleITK as sitk

from augtools.coretypes import ImageGeometry, ReferenceDomain
from augtools.exceptions import DimensionMismatchError, SingularTransformError
from augtools.loggers import logger
from augtools.transforms import TransformChain, affine, reflection, translation

from .builder import as_geometry

__all__ = [
    "build_orientation_transform",
    "build_centered_transform",
    "build_reflected_transform",
]


def build_orientation_transform(
    image: sitk.Image | ImageGeometry, domain: ReferenceDomain
) -> sitk.AffineTransform:
    """T0: linear part = native direction, translation = native origin - reference origin.

    Raises
    ------
    SingularTransformError
        If the native direction matrix is not invertible.
    DimensionMismatchError
        If image and domain dimensions differ.
    """
    geometry = as_geometry(image)
    if geometry.dimension != domain.dimension:
        msg = (
            f"Image is {geometry.dimension}D but the reference domain is "
            f"{domain.dimension}D."
        )
        raise DimensionMismatchError(msg)
    if not geometry.direction.is_invertible():
        msg = f"Image direction is not invertible: {geometry.direction!r}"
        raise SingularTransformError(msg)
    if not geometry.direction.is_normalized():
        logger.warning(
            "Image direction has non-unit rows; the reference grid will be scaled",
            direction=geometry.direction.to_numpy(),
        )

    return affine(
        geometry.direction.to_numpy(),
        translation=np.array(geometry.origin) - domain.reference_origin,
    )


def build_centered_transform(
    image: sitk.Image | ImageGeometry, domain: ReferenceDomain
) -> TransformChain:
    """Chain mapping reference-domain points into the native image space.

    The chain applies a centering translation first and T0 second, so that
    the reference centre lands on the native image's centre. Aligning
    centres instead of coordinate origins keeps scans from different
    acquisitions overlapping on the reference grid.

    Parameters
    ----------
    image : sitk.Image | ImageGeometry
        The native image.
    domain : ReferenceDomain
        The reference domain built from the image set.

    Returns
    -------
    TransformChain
        ``(centering, T0)`` in application order.
    """
    geometry = as_geometry(image)
    t0 = build_orientation_transform(geometry, domain)

    native_center = geometry.center
    offset = (
        np.array(t0.GetInverse().TransformPoint(tuple(native_center)))
        - domain.reference_center
    )
    chain = TransformChain.of(translation(offset), t0)
    logger.debug(
        "Built centered transform",
        native_center=native_center,
        centering_offset=offset,
    )
    return chain


def build_reflected_transform(
    centered_transform: TransformChain,
    domain: ReferenceDomain,
    axes: Sequence[int],
) -> TransformChain:
    """Fold a reflection into the centered chain so one resample flips the image.

    The reflection pivots on the midpoint of the reference grid, index
    ``(size - 1) / 2``, rather than on `domain.reference_center` (index
    ``size / 2``) used by the similarity families. Only the midpoint makes the
    result match resampling with `centered_transform` and then reversing the
    pixel order along `axes`.
    """
    flip = reflection(domain.dimension, axes, center=domain.midpoint)
    return centered_transform.after(flip)
