"""
Intensity augmentation.

Each intensity operation is described by an `IntensityFilter` value, a
`FilterKind` tag plus keyword parameters, and executed through the
`FILTER_DISPATCH` table. Adding a new operation means adding a kind, a
function and a table entry.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

import SimpleITK as sitk

from augtools.exceptions import UnknownFilterError

from .base_transform import BaseTransform

__all__ = [
    "FilterKind",
    "IntensityFilter",
    "FILTER_DISPATCH",
    "DEFAULT_FILTERS",
    "apply_filter",
    "mult_and_add_intensity_fields",
]


class FilterKind(str, Enum):
    SMOOTHING_RECURSIVE_GAUSSIAN = "smoothing_recursive_gaussian"
    DISCRETE_GAUSSIAN = "discrete_gaussian"
    HISTOGRAM_EQUALIZATION = "histogram_equalization"
    ADDITIVE_GAUSSIAN_NOISE = "additive_gaussian_noise"
    SALT_AND_PEPPER_NOISE = "salt_and_pepper_noise"
    SHOT_NOISE = "shot_noise"
    SPECKLE_NOISE = "speckle_noise"
    INTENSITY_FIELDS = "intensity_fields"


def smoothing_recursive_gaussian(
    image: sitk.Image, sigma: float = 2.0
) -> sitk.Image:
    return sitk.SmoothingRecursiveGaussian(image, float(sigma))


def discrete_gaussian(image: sitk.Image, variance: float = 4.0) -> sitk.Image:
    return sitk.DiscreteGaussian(image, float(variance))


def histogram_equalization(
    image: sitk.Image, alpha: float = 1.0, beta: float = 0.0, radius: int = 5
) -> sitk.Image:
    """Adaptive histogram equalization.

    ``alpha=1, beta=0`` gives classic histogram equalization,
    ``alpha=0, beta=1`` an unsharp mask.
    """
    heq = sitk.AdaptiveHistogramEqualizationImageFilter()
    heq.SetAlpha(float(alpha))
    heq.SetBeta(float(beta))
    heq.SetRadius([int(radius)] * image.GetDimension())
    return heq.Execute(image)


def additive_gaussian_noise(
    image: sitk.Image,
    mean: float = 0.0,
    standard_deviation: float = 0.1,
    seed: int | None = None,
) -> sitk.Image:
    noise = sitk.AdditiveGaussianNoiseImageFilter()
    noise.SetMean(float(mean))
    noise.SetStandardDeviation(float(standard_deviation))
    if seed is not None:
        noise.SetSeed(int(seed))
    return noise.Execute(image)


def salt_and_pepper_noise(
    image: sitk.Image, probability: float = 0.01, seed: int | None = None
) -> sitk.Image:
    noise = sitk.SaltAndPepperNoiseImageFilter()
    noise.SetProbability(float(probability))
    if seed is not None:
        noise.SetSeed(int(seed))
    return noise.Execute(image)


def shot_noise(
    image: sitk.Image, scale: float = 0.01, seed: int | None = None
) -> sitk.Image:
    noise = sitk.ShotNoiseImageFilter()
    noise.SetScale(float(scale))
    if seed is not None:
        noise.SetSeed(int(seed))
    return noise.Execute(image)


def speckle_noise(
    image: sitk.Image, standard_deviation: float = 0.4, seed: int | None = None
) -> sitk.Image:
    noise = sitk.SpeckleNoiseImageFilter()
    noise.SetStandardDeviation(float(standard_deviation))
    if seed is not None:
        noise.SetSeed(int(seed))
    return noise.Execute(image)


def mult_and_add_intensity_fields(
    image: sitk.Image,
    multiplicative_scale: float = 0.25,
    additive_scale: float | None = None,
    sigma_fraction: float = 0.2,
) -> sitk.Image:
    """Modulate intensities with smooth multiplicative and additive fields.

    Both fields are Gaussians centred on the image centre with a standard
    deviation of `sigma_fraction` of the physical extent along each axis.
    The result is ``(1 + g_mult) * image + g_add`` in float32.

    Parameters
    ----------
    image : sitk.Image
        Scalar input image.
    multiplicative_scale : float, optional
        Peak relative gain of the multiplicative field.
    additive_scale : float | None, optional
        Peak of the additive field. Defaults to 10% of the image maximum.
    sigma_fraction : float, optional
        Gaussian width relative to the image extent.
    """
    float_image = sitk.Cast(image, sitk.sitkFloat32)
    size = image.GetSize()
    spacing = image.GetSpacing()
    sigma = [
        max((sz - 1) * spc * sigma_fraction, spc)
        for sz, spc in zip(size, spacing)
    ]
    center = image.TransformContinuousIndexToPhysicalPoint(
        [sz / 2.0 for sz in size]
    )
    if additive_scale is None:
        _, maximum = sitk.MinimumMaximum(float_image)
        additive_scale = 0.1 * maximum

    def gaussian_field(scale: float) -> sitk.Image:
        return sitk.GaussianSource(
            sitk.sitkFloat32,
            size,
            sigma,
            center,
            float(scale),
            image.GetOrigin(),
            spacing,
            image.GetDirection(),
        )

    g_mult = gaussian_field(multiplicative_scale)
    g_add = gaussian_field(additive_scale)
    return (1.0 + g_mult) * float_image + g_add


FILTER_DISPATCH: dict[FilterKind, Callable[..., sitk.Image]] = {
    FilterKind.SMOOTHING_RECURSIVE_GAUSSIAN: smoothing_recursive_gaussian,
    FilterKind.DISCRETE_GAUSSIAN: discrete_gaussian,
    FilterKind.HISTOGRAM_EQUALIZATION: histogram_equalization,
    FilterKind.ADDITIVE_GAUSSIAN_NOISE: additive_gaussian_noise,
    FilterKind.SALT_AND_PEPPER_NOISE: salt_and_pepper_noise,
    FilterKind.SHOT_NOISE: shot_noise,
    FilterKind.SPECKLE_NOISE: speckle_noise,
    FilterKind.INTENSITY_FIELDS: mult_and_add_intensity_fields,
}


@dataclass(frozen=True)
class IntensityFilter(BaseTransform):
    """A tagged intensity operation: which filter to run and with what parameters.

    Parameters
    ----------
    kind : FilterKind | str
        The operation to run. Strings are converted to `FilterKind`.
    params : Mapping[str, Any]
        Keyword arguments for the operation. Omitted parameters use the
        defaults of the dispatched function.

    Raises
    ------
    UnknownFilterError
        If `kind` is not a known filter.
    ValueError
        If `params` names an argument the filter does not take.

    Examples
    --------
    >>> blur = IntensityFilter("smoothing_recursive_gaussian", {"sigma": 1.5})
    >>> blurred = blur(image)
    """

    kind: FilterKind
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            kind = FilterKind(self.kind)
        except ValueError as e:
            valid = [k.value for k in FilterKind]
            msg = f"Unknown intensity filter {self.kind!r}, expected one of {valid}."
            raise UnknownFilterError(msg) from e
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "params", dict(self.params))

        func = FILTER_DISPATCH.get(kind)
        if func is None:
            msg = f"No implementation registered for {kind.value}."
            raise UnknownFilterError(msg)
        accepted = set(inspect.signature(func).parameters) - {"image"}
        if unexpected := set(self.params) - accepted:
            msg = (
                f"{kind.value} got unexpected parameters {sorted(unexpected)}."
                f" Accepted: {sorted(accepted)}."
            )
            raise ValueError(msg)

    @property
    def name(self) -> str:
        return self.kind.value

    def __call__(self, image: sitk.Image) -> sitk.Image:
        return FILTER_DISPATCH[self.kind](image, **self.params)


def apply_filter(image: sitk.Image, kind: FilterKind | str, **params: Any) -> sitk.Image:
    """Run a single intensity filter by kind."""
    return IntensityFilter(kind, params)(image)


def _default_filters() -> tuple[IntensityFilter, ...]:
    return (
        IntensityFilter(FilterKind.SMOOTHING_RECURSIVE_GAUSSIAN, {"sigma": 2.0}),
        IntensityFilter(FilterKind.DISCRETE_GAUSSIAN, {"variance": 4.0}),
        IntensityFilter(FilterKind.HISTOGRAM_EQUALIZATION, {"alpha": 1.0, "beta": 0.0}),
        IntensityFilter(FilterKind.HISTOGRAM_EQUALIZATION, {"alpha": 0.0, "beta": 1.0}),
        IntensityFilter(FilterKind.ADDITIVE_GAUSSIAN_NOISE, {"mean": 0.0, "standard_deviation": 0.1}),
        IntensityFilter(FilterKind.SALT_AND_PEPPER_NOISE, {"probability": 0.01}),
        IntensityFilter(FilterKind.SHOT_NOISE, {"scale": 0.01}),
        IntensityFilter(FilterKind.SPECKLE_NOISE, {"standard_deviation": 0.4}),
        IntensityFilter(FilterKind.INTENSITY_FIELDS),
    )


# filter bank used when no filters are configured
DEFAULT_FILTERS = _default_filters()

