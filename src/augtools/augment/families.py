"""
Parametrized augmentation transform families.

A family turns one parameter tuple into a SimpleITK transform pivoting on a
given centre. Parameters are always interpreted in the reference domain, so
the same tuple produces comparable distortions for every input image.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Sequence

import numpy as np
import SimpleITK as sitk

from augtools.coretypes import ReferenceDomain
from augtools.exceptions import DimensionMismatchError, ParameterArityError
from augtools.transforms import reflection, similarity

__all__ = [
    "AugmentationFamily",
    "Similarity2DFamily",
    "Similarity3DFamily",
    "ReflectionFamily",
    "FAMILIES",
    "make_family",
]


class AugmentationFamily(ABC):
    """Base class for parametrized augmentation transforms."""

    dimension: ClassVar[int]

    @property
    @abstractmethod
    def parameter_names(self) -> tuple[str, ...]: ...

    @property
    @abstractmethod
    def identity_parameters(self) -> tuple[float, ...]:
        """Parameter values for which the family builds the identity transform."""

    @property
    def parameter_count(self) -> int:
        return len(self.parameter_names)

    def validate(self, parameters: Sequence[float]) -> None:
        if len(parameters) != self.parameter_count:
            msg = (
                f"{self.__class__.__name__} takes {self.parameter_count} "
                f"parameters {self.parameter_names}, got {len(parameters)}."
            )
            raise ParameterArityError(msg)

    def pivot(self, domain: ReferenceDomain) -> np.ndarray:
        """Point the augmentation rotates, scales or reflects around."""
        return domain.reference_center

    def __call__(
        self, parameters: Sequence[float], center: Sequence[float]
    ) -> sitk.Transform:
        self.validate(parameters)
        return self.build(parameters, center)

    @abstractmethod
    def build(
        self, parameters: Sequence[float], center: Sequence[float]
    ) -> sitk.Transform: ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self.parameter_names)})"


class Similarity2DFamily(AugmentationFamily):
    """Rotation, isotropic scale and translation in 2D: ``(scale, angle, tx, ty)``."""

    dimension = 2

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("scale", "angle", "tx", "ty")

    @property
    def identity_parameters(self) -> tuple[float, ...]:
        return (1.0, 0.0, 0.0, 0.0)

    def build(
        self, parameters: Sequence[float], center: Sequence[float]
    ) -> sitk.Transform:
        scale, angle, tx, ty = parameters
        return similarity(2, scale, (angle,), (tx, ty), center)


class Similarity3DFamily(AugmentationFamily):
    """Rotation, isotropic scale and translation in 3D.

    Parameters are ``(theta_x, theta_y, theta_z, tx, ty, tz, scale)`` with
    ZYX Euler angles in radians, converted to a versor internally.
    """

    dimension = 3

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("theta_x", "theta_y", "theta_z", "tx", "ty", "tz", "scale")

    @property
    def identity_parameters(self) -> tuple[float, ...]:
        return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0)

    def build(
        self, parameters: Sequence[float], center: Sequence[float]
    ) -> sitk.Transform:
        theta_x, theta_y, theta_z, tx, ty, tz, scale = parameters
        return similarity(
            3, scale, (theta_x, theta_y, theta_z), (tx, ty, tz), center
        )


class ReflectionFamily(AugmentationFamily):
    """Reflections selected by one flag per axis; flags of 0.5 or more reflect.

    The threshold lets uniform draws over ``[0, 1]`` pick each axis about
    half the time.

    Pivots on the grid midpoint so results match flipping by slicing.
    """

    _AXIS_NAMES = ("flip_x", "flip_y", "flip_z")

    def __init__(self, dimension: int) -> None:
        if dimension not in (2, 3):
            msg = f"Reflection family supports 2D and 3D, got {dimension}D."
            raise DimensionMismatchError(msg)
        self.dimension = dimension  # type: ignore[misc]

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return self._AXIS_NAMES[: self.dimension]

    @property
    def identity_parameters(self) -> tuple[float, ...]:
        return (0.0,) * self.dimension

    def pivot(self, domain: ReferenceDomain) -> np.ndarray:
        return domain.midpoint

    def build(
        self, parameters: Sequence[float], center: Sequence[float]
    ) -> sitk.Transform:
        axes = [axis for axis, flag in enumerate(parameters) if flag >= 0.5]
        return reflection(self.dimension, axes, center=center)


FAMILIES = {
    "similarity": {2: Similarity2DFamily, 3: Similarity3DFamily},
    "reflection": {2: ReflectionFamily, 3: ReflectionFamily},
}


def make_family(name: str, dimension: int) -> AugmentationFamily:
    """Instantiate a family by name for images of `dimension`."""
    try:
        cls = FAMILIES[name][dimension]
    except KeyError as ke:
        msg = f"No {dimension}D augmentation family named {name!r}. Known: {sorted(FAMILIES)}."
        raise ValueError(msg) from ke
    if cls is ReflectionFamily:
        return ReflectionFamily(dimension)
    return cls()
