import numpy as np
import pytest
import SimpleITK as sitk

from augtools.augment import (
    RegularParameterSpace,
    Similarity2DFamily,
    augment_images_intensity,
    augment_images_spatial,
    resample_images_to_domain,
)
from augtools.domain import build_centered_transform, build_reference_domain
from augtools.exceptions import SampleLimitError
from augtools.io import ExistingFileMode, ImageWriter
from augtools.transforms import FilterKind, IntensityFilter


@pytest.fixture
def domain(image_100x100, image_80x120):
    return build_reference_domain([image_100x100, image_80x120], size=32)


@pytest.fixture
def space():
    return RegularParameterSpace([[0.9, 1.1], [-0.2, 0.0, 0.2], [0.0], [0.0]])


def test_resample_images_to_domain(image_100x100, image_80x120, domain):
    resampled = resample_images_to_domain([image_100x100, image_80x120], domain)
    for image in resampled:
        assert image.GetSize() == domain.size
        np.testing.assert_allclose(image.GetSpacing(), domain.spacing)
        assert image.GetPixelID() == sitk.sitkFloat32


def test_augment_images_spatial(tmp_path, image_80x120, domain, space):
    writer = ImageWriter(tmp_path / "out")
    paths = augment_images_spatial(
        image_80x120,
        domain,
        build_centered_transform(image_80x120, domain),
        Similarity2DFamily(),
        space,
        writer,
        name="mr",
        show_progress=False,
    )
    assert len(paths) == len(space) == 6
    assert paths[0].name == "mr_spatial_000.mha"
    for path in paths:
        image = sitk.ReadImage(str(path))
        assert image.GetSize() == domain.size


def test_augment_images_spatial_nearest_keeps_labels(tmp_path, domain):
    array = np.zeros((100, 100), dtype=np.uint8)
    array[30:70, 20:60] = 3
    labels = sitk.GetImageFromArray(array)
    space = RegularParameterSpace([[1.0], [0.0, 0.3], [0.0], [0.0]])
    paths = augment_images_spatial(
        labels,
        domain,
        build_centered_transform(labels, domain),
        Similarity2DFamily(),
        space,
        ImageWriter(tmp_path),
        name="mask",
        interpolation="nearest",
        show_progress=False,
    )
    for path in paths:
        values = np.unique(sitk.GetArrayFromImage(sitk.ReadImage(str(path))))
        assert set(values.tolist()) <= {0, 3}


def test_sample_limit_checked_before_work(tmp_path, image_80x120, domain, space):
    out = tmp_path / "out"
    with pytest.raises(SampleLimitError):
        augment_images_spatial(
            image_80x120,
            domain,
            build_centered_transform(image_80x120, domain),
            Similarity2DFamily(),
            space,
            ImageWriter(out),
            max_samples=5,
            show_progress=False,
        )
    assert list(out.iterdir()) == []


def test_augment_images_intensity(tmp_path, small_image_2d):
    labels = sitk.Cast(small_image_2d * 10, sitk.sitkInt16)
    filters = (
        IntensityFilter(FilterKind.SMOOTHING_RECURSIVE_GAUSSIAN, {"sigma": 1.0}),
        IntensityFilter(FilterKind.INTENSITY_FIELDS),
    )
    writer = ImageWriter(
        tmp_path,
        filename_format="{name}/{kind}.nii.gz",
        existing_file_mode=ExistingFileMode.OVERWRITE,
    )
    paths = augment_images_intensity(
        {"ct": small_image_2d, "seg": labels}, writer, filters, show_progress=False
    )
    assert len(paths) == 4
    assert (tmp_path / "ct" / "intensity_fields.nii.gz").exists()
    seg = sitk.ReadImage(str(tmp_path / "seg" / "smoothing_recursive_gaussian.nii.gz"))
    assert seg.GetPixelID() == sitk.sitkInt16


def test_augment_images_intensity_saturates_integer_output(tmp_path):
    bright = sitk.Image([32, 32], sitk.sitkUInt8) + 250
    writer = ImageWriter(tmp_path, filename_format="{name}_{kind}.mha")
    (path,) = augment_images_intensity(
        {"bright": bright},
        writer,
        [IntensityFilter(FilterKind.INTENSITY_FIELDS)],
        show_progress=False,
    )
    result = sitk.ReadImage(str(path))
    assert result.GetPixelID() == sitk.sitkUInt8
    array = sitk.GetArrayViewFromImage(result)
    assert array[16, 16] == 255
    assert array.min() >= 250
