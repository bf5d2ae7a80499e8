__version__ = "0.1.0"

from .augment import (
    AugmentedSamples,
    RandomParameterSpace,
    RegularParameterSpace,
    enumerate_augmented_samples,
    make_family,
)
from .coretypes import Direction, ImageGeometry, ReferenceDomain
from .domain import (
    build_centered_transform,
    build_reference_domain,
    build_reflected_transform,
)
from .loggers import logger
from .transforms import TransformChain, resample_to_reference
from .utils import array_to_image, image_to_array

__all__ = [
    "logger",
    ## core api
    "build_reference_domain",
    "build_centered_transform",
    "build_reflected_transform",
    "enumerate_augmented_samples",
    "resample_to_reference",
    ## coretypes
    "Direction",
    "ImageGeometry",
    "ReferenceDomain",
    "TransformChain",
    ## augmentation
    "AugmentedSamples",
    "RegularParameterSpace",
    "RandomParameterSpace",
    "make_family",
    # From utils.imageutils
    "array_to_image",
    "image_to_array",
]
