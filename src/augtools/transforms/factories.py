"""Constructors for the spatial transforms used by the augmentation chains."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np
import SimpleITK as sitk

from augtools.exceptions import DimensionMismatchError, SingularTransformError

if TYPE_CHECKING:
    from augtools.coretypes import ImageGeometry

__all__ = [
    "affine",
    "translation",
    "similarity",
    "reflection",
    "reflection_matrix",
    "eul2quat",
    "random_bspline_transform",
]


def _as_square_matrix(matrix: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(matrix, dtype=np.float64)
    if arr.ndim == 1:
        dim = math.isqrt(arr.size)
        if dim * dim != arr.size:
            msg = f"Cannot reshape {arr.size} values into a square matrix."
            raise ValueError(msg)
        arr = arr.reshape(dim, dim)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        msg = f"Matrix must be square, got shape {arr.shape}."
        raise ValueError(msg)
    return arr


def _check_length(name: str, values: Sequence[float], dimension: int) -> None:
    if len(values) != dimension:
        msg = f"{name} has {len(values)} values, expected {dimension}."
        raise DimensionMismatchError(msg)


def affine(
    matrix: Sequence[float] | np.ndarray,
    translation: Sequence[float] | None = None,
    center: Sequence[float] | None = None,
) -> sitk.AffineTransform:
    """Create an affine transform ``x -> M (x - c) + c + t``.

    Parameters
    ----------
    matrix : Sequence[float] | np.ndarray
        Linear part, either nested or flattened row-major.
    translation : Sequence[float] | None, optional
        Translation, zero by default.
    center : Sequence[float] | None, optional
        Fixed centre of the linear part, the origin by default.

    Raises
    ------
    SingularTransformError
        If `matrix` is not invertible.
    """
    m = _as_square_matrix(matrix)
    dimension = m.shape[0]
    if abs(np.linalg.det(m)) < 1e-12:
        msg = f"Matrix is singular and cannot be inverted: {m.tolist()}"
        raise SingularTransformError(msg)

    transform = sitk.AffineTransform(dimension)
    transform.SetMatrix(tuple(m.flatten()))
    if translation is not None:
        _check_length("translation", translation, dimension)
        transform.SetTranslation(tuple(float(t) for t in translation))
    if center is not None:
        _check_length("center", center, dimension)
        transform.SetCenter(tuple(float(c) for c in center))
    return transform


def translation(offset: Sequence[float] | np.ndarray) -> sitk.TranslationTransform:
    offset = tuple(float(o) for o in offset)
    return sitk.TranslationTransform(len(offset), offset)


def eul2quat(ax: float, ay: float, az: float, atol: float = 1e-8) -> np.ndarray:
    """Convert ZYX Euler angles to the vector part of a unit quaternion.

    The rotation matrix is built as ``Rz @ Ry @ Rx`` (the convention of
    ``sitk.Euler3DTransform`` with ``ComputeZYX`` on). When the scalar part
    of the quaternion is close to zero the vector part is recovered from the
    largest diagonal entry, which stays numerically stable near 180 degrees.

    Parameters
    ----------
    ax, ay, az : float
        Rotation angles around x, y and z, in radians.
    atol : float, optional
        Tolerance for treating the scalar part as zero.

    Returns
    -------
    np.ndarray
        The three vector components (versor) accepted by
        ``sitk.Similarity3DTransform`` / ``sitk.VersorRigid3DTransform``.
    """
    cx, cy, cz = np.cos(ax), np.cos(ay), np.cos(az)
    sx, sy, sz = np.sin(ax), np.sin(ay), np.sin(az)
    r = np.array(
        [
            [cz * cy, cz * sy * sx - sz * cx, cz * sy * cx + sz * sx],
            [sz * cy, sz * sy * sx + cz * cx, sz * sy * cx - cz * sx],
            [-sy, cy * sx, cy * cx],
        ]
    )

    qs = 0.5 * np.sqrt(max(np.trace(r) + 1.0, 0.0))
    qv = np.zeros(3)
    if np.isclose(qs, 0.0, atol=atol):
        i = int(np.argmax(np.diag(r)))
        j = (i + 1) % 3
        k = (j + 1) % 3
        w = np.sqrt(r[i, i] - r[j, j] - r[k, k] + 1.0)
        qv[i] = 0.5 * w
        qv[j] = (r[i, j] + r[j, i]) / (2.0 * w)
        qv[k] = (r[i, k] + r[k, i]) / (2.0 * w)
    else:
        denom = 4.0 * qs
        qv[0] = (r[2, 1] - r[1, 2]) / denom
        qv[1] = (r[0, 2] - r[2, 0]) / denom
        qv[2] = (r[1, 0] - r[0, 1]) / denom
    return qv


def similarity(
    dimension: int,
    scale: float = 1.0,
    angles: Sequence[float] = (0.0, 0.0, 0.0),
    translation: Sequence[float] | None = None,
    center: Sequence[float] | None = None,
) -> sitk.Transform:
    """Create a rotation + isotropic scale + translation transform.

    For 2D only ``angles[0]`` is used; for 3D the angles are ZYX Euler
    angles around x, y and z.
    """
    if scale <= 0:
        msg = f"Scale must be positive, got {scale}."
        raise SingularTransformError(msg)
    translation = tuple(translation) if translation is not None else (0.0,) * dimension
    center = tuple(center) if center is not None else (0.0,) * dimension
    _check_length("translation", translation, dimension)
    _check_length("center", center, dimension)

    transform: sitk.Similarity2DTransform | sitk.Similarity3DTransform
    match dimension:
        case 2:
            transform = sitk.Similarity2DTransform()
            transform.SetCenter(tuple(float(c) for c in center))
            transform.SetParameters(
                (float(scale), float(angles[0]), *map(float, translation))
            )
        case 3:
            if len(angles) != 3:
                msg = f"3D similarity needs 3 angles, got {len(angles)}."
                raise DimensionMismatchError(msg)
            transform = sitk.Similarity3DTransform()
            transform.SetCenter(tuple(float(c) for c in center))
            transform.SetParameters(
                (
                    *map(float, eul2quat(*angles)),
                    *map(float, translation),
                    float(scale),
                )
            )
        case _:
            msg = f"Similarity transforms exist for 2D and 3D, got {dimension}D."
            raise DimensionMismatchError(msg)
    return transform


def reflection_matrix(dimension: int, axes: Sequence[int]) -> np.ndarray:
    """Signed-diagonal matrix with -1 on every reflected axis and +1 elsewhere."""
    diagonal = np.ones(dimension)
    for axis in axes:
        if not 0 <= axis < dimension:
            msg = f"Axis {axis} out of range for a {dimension}D reflection."
            raise ValueError(msg)
        diagonal[axis] = -1.0
    return np.diag(diagonal)


def reflection(
    dimension: int,
    axes: Sequence[int],
    center: Sequence[float] | None = None,
) -> sitk.AffineTransform:
    """Reflect across the planes perpendicular to `axes`, pivoting on `center`."""
    return affine(reflection_matrix(dimension, axes), center=center)


def random_bspline_transform(
    geometry: ImageGeometry,
    mesh_size: int | Sequence[int] = 4,
    max_displacement: float = 5.0,
    seed: int | None = None,
) -> sitk.BSplineTransform:
    """Free-form deformation with random control point displacements.

    Parameters
    ----------
    geometry : ImageGeometry
        Grid the B-spline control mesh is laid over, usually the reference
        domain.
    mesh_size : int | Sequence[int], optional
        Number of mesh cells per axis.
    max_displacement : float, optional
        Control point displacements are drawn uniformly from
        ``[-max_displacement, max_displacement]`` (physical units).
    seed : int | None, optional
        Seed for the random generator.
    """
    if isinstance(mesh_size, int):
        mesh_size = [mesh_size] * geometry.dimension
    _check_length("mesh_size", mesh_size, geometry.dimension)

    transform = sitk.BSplineTransformInitializer(
        geometry.to_image(sitk.sitkUInt8), [int(m) for m in mesh_size]
    )
    rng = np.random.default_rng(seed)
    n_params = len(transform.GetParameters())
    transform.SetParameters(
        tuple(rng.uniform(-max_displacement, max_displacement, n_params))
    )
    return transform
