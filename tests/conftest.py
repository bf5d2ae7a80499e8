from pathlib import Path

import numpy as np
import pytest
import SimpleITK as sitk

from augtools.utils import array_to_image


def make_image(
    size: tuple[int, ...],
    spacing: tuple[float, ...] | None = None,
    origin: tuple[float, ...] | None = None,
    direction: tuple[float, ...] | None = None,
    seed: int = 0,
) -> sitk.Image:
    """Float32 image with smooth, asymmetric content on the given grid."""
    shape = tuple(reversed(size))
    grids = np.meshgrid(*[np.linspace(0, 1, n) for n in shape], indexing="ij")
    array = sum((k + 1) * g for k, g in enumerate(grids))
    array = array + 0.1 * np.random.default_rng(seed).random(shape)
    return array_to_image(
        array.astype(np.float32),
        origin=origin,
        direction=direction,
        spacing=spacing,
    )


def rotation_2d(angle: float) -> tuple[float, ...]:
    c, s = np.cos(angle), np.sin(angle)
    return (c, -s, s, c)


@pytest.fixture
def image_100x100() -> sitk.Image:
    return make_image((100, 100))


@pytest.fixture
def image_80x120() -> sitk.Image:
    return make_image((80, 120), seed=1)


@pytest.fixture
def oblique_image_2d() -> sitk.Image:
    """Rotated, anisotropic, off-origin 2D image."""
    return make_image(
        (60, 40),
        spacing=(0.8, 1.25),
        origin=(10.0, -5.0),
        direction=rotation_2d(np.pi / 6),
        seed=2,
    )


@pytest.fixture
def image_3d() -> sitk.Image:
    return make_image((20, 24, 16), spacing=(1.0, 1.0, 2.0), seed=3)


@pytest.fixture
def small_image_2d() -> sitk.Image:
    return make_image((32, 32), seed=4)


@pytest.fixture
def image_file(tmp_path: Path, image_100x100: sitk.Image) -> Path:
    path = tmp_path / "inputs" / "ct.mha"
    path.parent.mkdir()
    sitk.WriteImage(image_100x100, str(path))
    return path


@pytest.fixture
def second_image_file(tmp_path: Path, image_80x120: sitk.Image) -> Path:
    path = tmp_path / "inputs" / "mr.nrrd"
    path.parent.mkdir(exist_ok=True)
    sitk.WriteImage(image_80x120, str(path))
    return path
