from .base_transform import BaseTransform
from .chain import TransformChain
from .distortion import RadialDistortion, radial_distort, radial_distortion_field
from .factories import (
    affine,
    eul2quat,
    random_bspline_transform,
    reflection,
    reflection_matrix,
    similarity,
    translation,
)
from .functional import (
    INTERPOLATORS,
    flip_by_slicing,
    get_interpolator,
    physical_points,
    resample_to_reference,
)
from .intensity_transforms import (
    DEFAULT_FILTERS,
    FILTER_DISPATCH,
    FilterKind,
    IntensityFilter,
    apply_filter,
    mult_and_add_intensity_fields,
)

__all__ = [
    # base
    "BaseTransform",
    # chain
    "TransformChain",
    # factories
    "affine",
    "translation",
    "similarity",
    "reflection",
    "reflection_matrix",
    "eul2quat",
    "random_bspline_transform",
    # functional
    "INTERPOLATORS",
    "get_interpolator",
    "resample_to_reference",
    "flip_by_slicing",
    "physical_points",
    # intensity
    "FilterKind",
    "IntensityFilter",
    "FILTER_DISPATCH",
    "DEFAULT_FILTERS",
    "apply_filter",
    "mult_and_add_intensity_fields",
    # distortion
    "RadialDistortion",
    "radial_distort",
    "radial_distortion_field",
]
