import numpy as np
import pytest
import SimpleITK as sitk

from augtools.coretypes import Direction, ImageGeometry, ReferenceDomain


def test_from_image_matches_sitk(oblique_image_2d):
    geometry = ImageGeometry.from_image(oblique_image_2d)
    assert geometry.size == oblique_image_2d.GetSize()
    assert geometry.spacing == oblique_image_2d.GetSpacing()
    assert geometry.origin == oblique_image_2d.GetOrigin()
    assert tuple(geometry.direction) == pytest.approx(oblique_image_2d.GetDirection())


@pytest.mark.parametrize("index", [(0.0, 0.0), (10.5, 3.25), (59.0, 39.0)])
def test_continuous_index_to_physical(oblique_image_2d, index):
    """Same mapping as SimpleITK."""
    geometry = ImageGeometry.from_image(oblique_image_2d)
    expected = oblique_image_2d.TransformContinuousIndexToPhysicalPoint(index)
    np.testing.assert_allclose(
        geometry.continuous_index_to_physical(index), expected
    )


def test_physical_extent_center_midpoint():
    geometry = ImageGeometry(
        size=(100, 80),
        spacing=(1.0, 0.5),
        origin=(0.0, 0.0),
        direction=Direction.identity(2),
    )
    np.testing.assert_allclose(geometry.physical_extent, [99.0, 39.5])
    np.testing.assert_allclose(geometry.center, [50.0, 20.0])
    np.testing.assert_allclose(geometry.midpoint, [49.5, 19.75])


def test_invalid_geometry():
    with pytest.raises(ValueError, match="Inconsistent"):
        ImageGeometry((10, 10), (1.0, 1.0, 1.0), (0.0, 0.0), Direction.identity(2))
    with pytest.raises(ValueError, match="positive"):
        ImageGeometry((10, 10), (1.0, 0.0), (0.0, 0.0), Direction.identity(2))


def test_to_image():
    domain = ReferenceDomain(
        size=(16, 8, 4),
        spacing=(0.5, 1.0, 2.0),
        origin=(0.0, 0.0, 0.0),
        direction=Direction.identity(3),
        physical_size=(7.5, 7.0, 6.0),
    )
    image = domain.to_image(sitk.sitkUInt8)
    assert image.GetSize() == (16, 8, 4)
    assert image.GetSpacing() == (0.5, 1.0, 2.0)
    assert image.GetPixelID() == sitk.sitkUInt8
    np.testing.assert_allclose(domain.reference_origin, [0.0, 0.0, 0.0])
    np.testing.assert_allclose(domain.reference_center, [4.0, 4.0, 4.0])
