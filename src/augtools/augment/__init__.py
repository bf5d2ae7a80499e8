from .families import (
    FAMILIES,
    AugmentationFamily,
    ReflectionFamily,
    Similarity2DFamily,
    Similarity3DFamily,
    make_family,
)
from .parameter_space import (
    ParameterSpace,
    RandomParameterSpace,
    RegularParameterSpace,
    regular_space_from_mapping,
)
from .pipeline import (
    augment_images_intensity,
    augment_images_spatial,
    resample_images_to_domain,
)
from .samples import AugmentedSample, AugmentedSamples, enumerate_augmented_samples

__all__ = [
    # families
    "AugmentationFamily",
    "Similarity2DFamily",
    "Similarity3DFamily",
    "ReflectionFamily",
    "FAMILIES",
    "make_family",
    # parameter spaces
    "ParameterSpace",
    "RegularParameterSpace",
    "RandomParameterSpace",
    "regular_space_from_mapping",
    # samples
    "AugmentedSample",
    "AugmentedSamples",
    "enumerate_augmented_samples",
    # pipeline
    "resample_images_to_domain",
    "augment_images_spatial",
    "augment_images_intensity",
]
