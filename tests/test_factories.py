import numpy as np
import pytest
import SimpleITK as sitk

from augtools.coretypes import Direction, ImageGeometry
from augtools.exceptions import DimensionMismatchError, SingularTransformError
from augtools.transforms import (
    affine,
    eul2quat,
    random_bspline_transform,
    reflection,
    reflection_matrix,
    similarity,
    translation,
)


def test_affine():
    transform = affine((0.0, -1.0, 1.0, 0.0), translation=(1.0, 0.0))
    np.testing.assert_allclose(transform.TransformPoint((1.0, 0.0)), (1.0, 1.0))


def test_affine_center():
    transform = affine(np.diag([2.0, 2.0]), center=(1.0, 1.0))
    np.testing.assert_allclose(transform.TransformPoint((1.0, 1.0)), (1.0, 1.0))
    np.testing.assert_allclose(transform.TransformPoint((2.0, 1.0)), (3.0, 1.0))


def test_affine_singular():
    with pytest.raises(SingularTransformError):
        affine([[1.0, 2.0], [2.0, 4.0]])


def test_affine_bad_translation():
    with pytest.raises(DimensionMismatchError):
        affine(np.identity(3), translation=(1.0, 2.0))


def test_translation():
    transform = translation(np.array([1.0, 2.0, 3.0]))
    assert transform.GetDimension() == 3
    np.testing.assert_allclose(transform.TransformPoint((0.0, 0.0, 0.0)), (1.0, 2.0, 3.0))


@pytest.mark.parametrize(
    "angles",
    [
        (0.0, 0.0, 0.0),
        (0.1, 0.2, 0.3),
        (-0.7, 1.1, 2.5),
    ],
)
def test_eul2quat_matches_euler3d(angles):
    euler = sitk.Euler3DTransform()
    euler.SetComputeZYX(True)
    euler.SetRotation(*angles)

    versor = sitk.Similarity3DTransform()
    versor.SetParameters((*map(float, eul2quat(*angles)), 0.0, 0.0, 0.0, 1.0))

    np.testing.assert_allclose(versor.GetMatrix(), euler.GetMatrix(), atol=1e-7)


@pytest.mark.parametrize(
    "angles, axis",
    [
        ((np.pi, 0.0, 0.0), [1.0, 0.0, 0.0]),
        ((0.0, np.pi, 0.0), [0.0, 1.0, 0.0]),
        ((0.0, 0.0, np.pi), [0.0, 0.0, 1.0]),
    ],
)
def test_eul2quat_half_turns(angles, axis):
    """Half turns give a unit versor with no scalar part.

    ITK renormalizes the versor and recovers a tiny scalar part, so the
    matrix only matches the Euler transform to about 1e-5.
    """
    np.testing.assert_allclose(eul2quat(*angles), axis, atol=1e-8)

    euler = sitk.Euler3DTransform()
    euler.SetComputeZYX(True)
    euler.SetRotation(*angles)
    versor = sitk.Similarity3DTransform()
    versor.SetParameters((*map(float, eul2quat(*angles)), 0.0, 0.0, 0.0, 1.0))
    np.testing.assert_allclose(versor.GetMatrix(), euler.GetMatrix(), atol=1e-4)


def test_similarity_2d():
    transform = similarity(2, scale=2.0, angles=(0.0,), translation=(1.0, 0.0))
    np.testing.assert_allclose(transform.TransformPoint((1.0, 0.0)), (3.0, 0.0))

    rotated = similarity(2, angles=(np.pi / 2,), center=(1.0, 1.0))
    np.testing.assert_allclose(rotated.TransformPoint((2.0, 1.0)), (1.0, 2.0), atol=1e-12)


def test_similarity_3d_pivot():
    center = (5.0, -2.0, 3.0)
    transform = similarity(3, scale=0.8, angles=(0.4, -0.2, 1.0), center=center)
    np.testing.assert_allclose(transform.TransformPoint(center), center, atol=1e-12)


def test_similarity_invalid():
    with pytest.raises(SingularTransformError):
        similarity(2, scale=0.0)
    with pytest.raises(DimensionMismatchError):
        similarity(4)


def test_reflection_matrix():
    np.testing.assert_array_equal(
        reflection_matrix(3, [0, 2]), np.diag([-1.0, 1.0, -1.0])
    )
    with pytest.raises(ValueError):
        reflection_matrix(2, [2])


def test_reflection_pivot():
    transform = reflection(2, [0], center=(5.0, 0.0))
    np.testing.assert_allclose(transform.TransformPoint((1.0, 3.0)), (9.0, 3.0))


def test_random_bspline_transform_is_seeded():
    geometry = ImageGeometry((32, 32), (1.0, 1.0), (0.0, 0.0), Direction.identity(2))
    first = random_bspline_transform(geometry, mesh_size=4, max_displacement=3.0, seed=7)
    second = random_bspline_transform(geometry, mesh_size=4, max_displacement=3.0, seed=7)

    params = np.array(first.GetParameters())
    np.testing.assert_array_equal(params, second.GetParameters())
    assert np.abs(params).max() <= 3.0
    assert params.any()
