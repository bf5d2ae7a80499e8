import numpy as np
import pytest
import SimpleITK as sitk

from augtools.exceptions import DimensionMismatchError, SingularTransformError
from augtools.transforms import TransformChain, affine, similarity, translation


@pytest.fixture
def steps():
    """Three non-commuting 2D transforms."""
    return (
        translation((1.0, -2.0)),
        similarity(2, scale=1.5, angles=(0.3,), center=(4.0, 4.0)),
        affine([[1.0, 0.5], [0.0, 2.0]], translation=(0.0, 3.0)),
    )


def test_apply_follows_step_order(steps):
    a, b, c = steps
    point = (2.0, 7.0)
    expected = c.TransformPoint(b.TransformPoint(a.TransformPoint(point)))
    np.testing.assert_allclose(TransformChain(steps).apply(point), expected)


def applied_in_order(*transforms):
    """Nested sitk composite applying `transforms` first to last."""
    composite = sitk.CompositeTransform(2)
    for transform in reversed(transforms):
        composite.AddTransform(transform)
    return composite


def test_associativity(steps):
    """(a then b) then c equals a then (b then c), checked against sitk nesting."""
    a, b, c = steps
    left = applied_in_order(applied_in_order(a, b), c)
    right = applied_in_order(a, applied_in_order(b, c))
    chain = TransformChain.of(a, b).then(c)
    nested = TransformChain.of(a).then(TransformChain.of(b, c)).to_sitk()
    for point in [(-3.0, 5.5), (0.0, 0.0), (12.0, -7.25)]:
        expected = c.TransformPoint(b.TransformPoint(a.TransformPoint(point)))
        np.testing.assert_allclose(left.TransformPoint(point), expected)
        np.testing.assert_allclose(right.TransformPoint(point), expected)
        np.testing.assert_allclose(chain.apply(point), right.TransformPoint(point))
        np.testing.assert_allclose(nested.TransformPoint(point), left.TransformPoint(point))


def test_after_is_composition(steps):
    """``A.after(B)`` applies B first."""
    a, b, _ = steps
    chain = TransformChain.of(a).after(b)
    assert chain.steps == (b, a)


def test_to_sitk_preserves_order(steps):
    chain = TransformChain(steps)
    composite = chain.to_sitk()
    for point in [(0.0, 0.0), (10.0, -4.0), (2.5, 8.25)]:
        np.testing.assert_allclose(
            composite.TransformPoint(point), chain.apply(point)
        )


def test_inverse_round_trip(steps):
    chain = TransformChain(steps)
    point = (6.0, -1.0)
    np.testing.assert_allclose(
        chain.inverse().apply(chain.apply(point)), point, atol=1e-9
    )


def test_inverse_singular_step():
    singular = sitk.AffineTransform(2)
    singular.SetMatrix((1.0, 2.0, 2.0, 4.0))
    with pytest.raises(SingularTransformError):
        TransformChain.of(translation((1.0, 1.0)), singular).inverse()


def test_invalid_chains():
    with pytest.raises(ValueError):
        TransformChain(())
    with pytest.raises(DimensionMismatchError):
        TransformChain.of(translation((1.0, 1.0)), translation((1.0, 1.0, 1.0)))
    with pytest.raises(DimensionMismatchError):
        TransformChain.of(translation((1.0, 1.0))).apply((1.0, 2.0, 3.0))
