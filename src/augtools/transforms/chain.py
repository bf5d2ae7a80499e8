"""
Ordered chains of SimpleITK transforms.

SimpleITK's `CompositeTransform` applies the *last added* transform first,
which is easy to get backwards. `TransformChain` stores its steps in
**application order** instead: ``steps[0]`` is applied first to a point on the
output grid, ``steps[-1]`` last, and the result lies in the input image's
physical space. Conversion to SimpleITK happens once, in `to_sitk`.

In function-composition notation ``A.after(B)`` is ``A ∘ B`` (B first), and
``A.then(B)`` is ``B ∘ A`` (A first).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import SimpleITK as sitk

from augtools.exceptions import DimensionMismatchError, SingularTransformError

__all__ = ["TransformChain"]


@dataclass(frozen=True)
class TransformChain:
    """Immutable, ordered sequence of spatial transforms.

    Steps are shared, not copied; do not mutate a transform after adding it
    to a chain.

    Parameters
    ----------
    steps : tuple[sitk.Transform, ...]
        Transforms in the order they are applied to a point.

    Examples
    --------
    >>> centering = sitk.TranslationTransform(2, (1.0, 0.0))
    >>> to_native = sitk.AffineTransform(2)
    >>> chain = TransformChain((centering, to_native))
    >>> chain.apply((0.0, 0.0))
    array([1., 0.])
    """

    steps: tuple[sitk.Transform, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        if not self.steps:
            raise ValueError("A TransformChain needs at least one step.")
        dims = {step.GetDimension() for step in self.steps}
        if len(dims) != 1:
            msg = f"All steps must share one dimension, got {sorted(dims)}."
            raise DimensionMismatchError(msg)

    @classmethod
    def of(cls, *steps: sitk.Transform | TransformChain) -> TransformChain:
        """Build a chain from transforms and/or chains, in application order."""
        flat: list[sitk.Transform] = []
        for step in steps:
            if isinstance(step, TransformChain):
                flat.extend(step.steps)
            else:
                flat.append(step)
        return cls(tuple(flat))

    @property
    def dimension(self) -> int:
        return self.steps[0].GetDimension()

    def then(self, other: sitk.Transform | TransformChain) -> TransformChain:
        """Apply this chain first, then `other`."""
        return TransformChain.of(self, other)

    def after(self, other: sitk.Transform | TransformChain) -> TransformChain:
        """Apply `other` first, then this chain (``self ∘ other``)."""
        return TransformChain.of(other, self)

    def apply(self, point: Sequence[float] | np.ndarray) -> np.ndarray:
        """Map a single point through every step in order."""
        current = tuple(float(p) for p in point)
        if len(current) != self.dimension:
            msg = (
                f"Point has {len(current)} coordinates, "
                f"chain is {self.dimension}D."
            )
            raise DimensionMismatchError(msg)
        for step in self.steps:
            current = step.TransformPoint(current)
        return np.array(current)

    def inverse(self) -> TransformChain:
        """Chain mapping points back through the inverted steps.

        Raises
        ------
        SingularTransformError
            If any step has no inverse.
        """
        inverted: list[sitk.Transform] = []
        for n, step in enumerate(reversed(self.steps)):
            try:
                inverted.append(step.GetInverse())
            except RuntimeError as e:
                msg = f"Step {len(self.steps) - n - 1} ({step.GetName()}) is not invertible."
                raise SingularTransformError(msg) from e
        return TransformChain(tuple(inverted))

    def to_sitk(self) -> sitk.CompositeTransform:
        """Build the equivalent `sitk.CompositeTransform` for resampling."""
        composite = sitk.CompositeTransform(self.dimension)
        # CompositeTransform applies the last added transform first
        for step in reversed(self.steps):
            composite.AddTransform(step)
        return composite

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self) -> str:
        names = " -> ".join(step.GetName() for step in self.steps)
        return f"TransformChain({names})"
