from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np
import SimpleITK as sitk

from augtools.coretypes import ImageGeometry, ReferenceDomain
from augtools.exceptions import DimensionMismatchError, ParameterArityError
from augtools.transforms import TransformChain

from .families import AugmentationFamily
from .parameter_space import ParameterSpace

__all__ = ["AugmentedSample", "AugmentedSamples", "enumerate_augmented_samples"]


@dataclass(frozen=True)
class AugmentedSample:
    """One augmentation: its parameters and the full resampling transform."""

    index: int
    parameters: tuple[float, ...]
    transform: TransformChain


@dataclass(frozen=True)
class AugmentedSamples:
    """Lazy, restartable sequence of augmented samples for one image.

    ``len()`` is available before anything is built. Each iteration builds
    the augmentation transform for a parameter tuple and composes it as
    ``centered_transform ∘ augmentation``: the augmentation acts first, in
    the reference domain, then the centered chain maps into native space.
    """

    centered_transform: TransformChain
    family: AugmentationFamily
    parameter_space: ParameterSpace
    center: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.parameter_space)

    def __iter__(self) -> Iterator[AugmentedSample]:
        for index, parameters in enumerate(self.parameter_space):
            augmentation = self.family(parameters, self.center)
            yield AugmentedSample(
                index=index,
                parameters=tuple(parameters),
                transform=self.centered_transform.after(augmentation),
            )


def enumerate_augmented_samples(
    image: sitk.Image | ImageGeometry,
    domain: ReferenceDomain,
    centered_transform: TransformChain,
    family: AugmentationFamily,
    parameter_space: ParameterSpace,
) -> AugmentedSamples:
    """Prepare the augmented samples of one image without building them.

    Configuration is checked here, before any transform is built or any
    resampling happens.

    Parameters
    ----------
    image : sitk.Image | ImageGeometry
        The native image the samples will be resampled from.
    domain : ReferenceDomain
        Reference domain; the family pivots on its centre.
    centered_transform : TransformChain
        Output of `build_centered_transform` for `image`.
    family : AugmentationFamily
        Parametrized augmentation transform.
    parameter_space : ParameterSpace
        Parameter tuples, one per sample.

    Returns
    -------
    AugmentedSamples
        Sized lazy iterable of `AugmentedSample`.

    Raises
    ------
    DimensionMismatchError
        If image, domain, chain and family dimensions disagree.
    ParameterArityError
        If the parameter space arity differs from the family's parameter count.
    """
    image_dim = (
        image.dimension
        if isinstance(image, ImageGeometry)
        else image.GetDimension()
    )
    dims = {
        "image": image_dim,
        "domain": domain.dimension,
        "centered_transform": centered_transform.dimension,
        "family": family.dimension,
    }
    if len(set(dims.values())) != 1:
        msg = f"Dimension mismatch between inputs: {dims}"
        raise DimensionMismatchError(msg)

    if parameter_space.arity != family.parameter_count:
        msg = (
            f"{family!r} takes {family.parameter_count} parameters, "
            f"the parameter space provides {parameter_space.arity}."
        )
        raise ParameterArityError(msg)

    center = tuple(float(c) for c in np.asarray(family.pivot(domain)))
    return AugmentedSamples(
        centered_transform=centered_transform,
        family=family,
        parameter_space=parameter_space,
        center=center,
    )
