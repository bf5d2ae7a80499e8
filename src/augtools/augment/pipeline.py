"""
Batch drivers: resample, augment and write.

These functions do the expensive work (resampling and file I/O) for
samples prepared by `enumerate_augmented_samples`, one sample at a time.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import SimpleITK as sitk
from tqdm import tqdm

from augtools.coretypes import ReferenceDomain
from augtools.domain import build_centered_transform
from augtools.exceptions import SampleLimitError
from augtools.io import ImageWriter
from augtools.loggers import logger, tqdm_logging_redirect
from augtools.transforms import (
    DEFAULT_FILTERS,
    IntensityFilter,
    TransformChain,
    resample_to_reference,
)
from augtools.utils import cast_like, timer

from .families import AugmentationFamily
from .parameter_space import ParameterSpace
from .samples import enumerate_augmented_samples

__all__ = [
    "resample_images_to_domain",
    "augment_images_spatial",
    "augment_images_intensity",
]


def resample_images_to_domain(
    images: Sequence[sitk.Image],
    domain: ReferenceDomain,
    interpolation: str = "linear",
    default_value: float = 0.0,
) -> list[sitk.Image]:
    """Resample every image onto the reference domain, centres aligned."""
    return [
        resample_to_reference(
            image,
            domain,
            build_centered_transform(image, domain),
            interpolation=interpolation,
            default_value=default_value,
        )
        for image in images
    ]


@timer("Spatial augmentation")
def augment_images_spatial(
    image: sitk.Image,
    domain: ReferenceDomain,
    centered_transform: TransformChain,
    family: AugmentationFamily,
    parameter_space: ParameterSpace,
    writer: ImageWriter,
    name: str = "image",
    interpolation: str = "linear",
    default_value: float = 0.0,
    max_samples: int | None = None,
    show_progress: bool = True,
) -> list[Path]:
    """Generate and save spatially augmented copies of one image.

    Parameters
    ----------
    image : sitk.Image
        Native image to augment.
    domain : ReferenceDomain
        Grid every augmented image is resampled onto.
    centered_transform : TransformChain
        Output of `build_centered_transform` for `image`.
    family : AugmentationFamily
        Augmentation transform family.
    parameter_space : ParameterSpace
        One parameter tuple per generated image.
    writer : ImageWriter
        Receives ``name``, ``kind="spatial"`` and ``index`` as context.
    name : str, optional
        Identifier of `image` used in file names.
    interpolation : str, optional
        "linear", "nearest" (label images) or "bspline".
    default_value : float, optional
        Fill value outside the native image.
    max_samples : int | None, optional
        Refuse to start if the space has more samples than this.
    show_progress : bool, optional
        Show a tqdm progress bar.

    Returns
    -------
    list[Path]
        Written file paths in sample order.

    Raises
    ------
    SampleLimitError
        If ``len(parameter_space) > max_samples``. Raised before any work.
    """
    samples = enumerate_augmented_samples(
        image, domain, centered_transform, family, parameter_space
    )
    n_samples = len(samples)
    if max_samples is not None and n_samples > max_samples:
        msg = (
            f"Parameter space for {name!r} yields {n_samples} samples, "
            f"more than the allowed {max_samples}."
        )
        raise SampleLimitError(msg)

    logger.info(
        "Augmenting image",
        name=name,
        family=repr(family),
        n_samples=n_samples,
        interpolation=interpolation,
    )
    paths: list[Path] = []
    with tqdm_logging_redirect():
        for sample in tqdm(
            samples,
            total=n_samples,
            desc=f"Augmenting {name}",
            disable=not show_progress,
        ):
            augmented = resample_to_reference(
                image,
                domain,
                sample.transform,
                interpolation=interpolation,
                default_value=default_value,
            )
            paths.append(
                writer.save(
                    augmented, name=name, kind="spatial", index=sample.index
                )
            )
            logger.debug(
                "Saved augmented sample",
                index=sample.index,
                parameters=sample.parameters,
            )
    return paths


@timer("Intensity augmentation")
def augment_images_intensity(
    images: Mapping[str, sitk.Image],
    writer: ImageWriter,
    filters: Sequence[IntensityFilter] = DEFAULT_FILTERS,
    show_progress: bool = True,
) -> list[Path]:
    """Apply every intensity filter to every image and save the results.

    Results are cast back to each input's pixel type, saturating at the
    limits of integer types. The writer receives
    ``name``, ``kind`` (the filter kind) and ``index`` (the filter position).
    """
    paths: list[Path] = []
    total = len(images) * len(filters)
    with tqdm_logging_redirect(), tqdm(
        total=total, desc="Intensity augmentation", disable=not show_progress
    ) as pbar:
        for name, image in images.items():
            for index, intensity_filter in enumerate(filters):
                result = cast_like(intensity_filter(image), image)
                logger.debug(
                    "Applied intensity filter",
                    name=name,
                    filter=intensity_filter.name,
                )
                paths.append(
                    writer.save(
                        result,
                        name=name,
                        kind=intensity_filter.name,
                        index=index,
                    )
                )
                pbar.update(1)
    return paths
