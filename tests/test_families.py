import numpy as np
import pytest

from augtools.augment import (
    RandomParameterSpace,
    ReflectionFamily,
    Similarity2DFamily,
    Similarity3DFamily,
    make_family,
)
from augtools.exceptions import DimensionMismatchError, ParameterArityError


@pytest.mark.parametrize(
    "family",
    [Similarity2DFamily(), Similarity3DFamily(), ReflectionFamily(2), ReflectionFamily(3)],
    ids=repr,
)
def test_identity_parameters(family):
    center = (1.0,) * family.dimension
    point = (3.0, -2.0, 7.0)[: family.dimension]
    transform = family(family.identity_parameters, center)
    np.testing.assert_allclose(transform.TransformPoint(point), point, atol=1e-12)
    assert len(family.identity_parameters) == family.parameter_count


def test_arity_checked():
    with pytest.raises(ParameterArityError):
        Similarity2DFamily()((1.0, 0.0), (0.0, 0.0))


def test_similarity_2d_parameters():
    family = Similarity2DFamily()
    assert family.parameter_names == ("scale", "angle", "tx", "ty")
    transform = family((2.0, 0.0, 1.0, 0.0), (0.0, 0.0))
    np.testing.assert_allclose(transform.TransformPoint((1.0, 1.0)), (3.0, 2.0))


def test_similarity_3d_rotation_about_z():
    transform = Similarity3DFamily()(
        (0.0, 0.0, np.pi / 2, 0.0, 0.0, 0.0, 1.0), (0.0, 0.0, 0.0)
    )
    np.testing.assert_allclose(
        transform.TransformPoint((1.0, 0.0, 0.0)), (0.0, 1.0, 0.0), atol=1e-12
    )


def test_reflection_flags():
    family = ReflectionFamily(3)
    assert family.parameter_names == ("flip_x", "flip_y", "flip_z")
    transform = family((1.0, 0.0, 1.0), (0.0, 0.0, 0.0))
    np.testing.assert_allclose(
        transform.TransformPoint((1.0, 2.0, 3.0)), (-1.0, 2.0, -3.0)
    )


def test_reflection_flag_threshold():
    family = ReflectionFamily(2)
    transform = family((0.49, 0.5), (0.0, 0.0))
    np.testing.assert_allclose(transform.TransformPoint((1.0, 2.0)), (1.0, -2.0))


def test_random_reflection_flags_mix():
    family = ReflectionFamily(2)
    space = RandomParameterSpace([(0.0, 1.0), (0.0, 1.0)], n=200, seed=3)
    flipped_x = [
        family(flags, (0.0, 0.0)).TransformPoint((1.0, 0.0))[0] < 0 for flags in space
    ]
    assert 50 < sum(flipped_x) < 150


def test_reflection_dimension():
    with pytest.raises(DimensionMismatchError):
        ReflectionFamily(4)


def test_make_family():
    assert isinstance(make_family("similarity", 2), Similarity2DFamily)
    assert isinstance(make_family("similarity", 3), Similarity3DFamily)
    assert make_family("reflection", 3).dimension == 3
    with pytest.raises(ValueError):
        make_family("shear", 2)
    with pytest.raises(ValueError):
        make_family("similarity", 4)
