"""
Parameter spaces for spatial augmentation.

A parameter space is a lazy, restartable iterable of parameter tuples with a
known length. Nothing is materialized up front, so callers can check
``len(space)`` before committing to a batch: a handful of ranges multiply
quickly (five ranges of three values already give 243 samples).
"""

from __future__ import annotations

import itertools
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

__all__ = [
    "ParameterSpace",
    "RegularParameterSpace",
    "RandomParameterSpace",
    "regular_space_from_mapping",
]

Parameters = tuple[float, ...]


class ParameterSpace(ABC):
    """Sized, restartable iterable of parameter tuples."""

    @property
    @abstractmethod
    def arity(self) -> int:
        """Number of values in each parameter tuple."""

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __iter__(self) -> Iterator[Parameters]: ...


@dataclass(frozen=True)
class RegularParameterSpace(ParameterSpace):
    """Cartesian product of independent per-parameter value ranges.

    Parameters
    ----------
    ranges : Sequence[Sequence[float]]
        One sequence of values per parameter, e.g. ``np.linspace`` output.
        The last parameter varies fastest.

    Examples
    --------
    >>> space = RegularParameterSpace([[0.0, 0.1], [1.0], [-5.0, 0.0, 5.0]])
    >>> len(space)
    6
    >>> next(iter(space))
    (0.0, 1.0, -5.0)
    """

    ranges: tuple[tuple[float, ...], ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "ranges",
            tuple(tuple(float(v) for v in values) for values in self.ranges),
        )

    @property
    def arity(self) -> int:
        return len(self.ranges)

    def __len__(self) -> int:
        if not self.ranges:
            return 0
        return math.prod(len(values) for values in self.ranges)

    def __iter__(self) -> Iterator[Parameters]:
        if not self.ranges:
            return iter(())
        return itertools.product(*self.ranges)


@dataclass(frozen=True)
class RandomParameterSpace(ParameterSpace):
    """`n` parameter tuples drawn uniformly within per-parameter bounds.

    With a `seed`, every iteration yields the same tuples; without one each
    iteration draws fresh values.

    Parameters
    ----------
    bounds : Sequence[tuple[float, float]]
        ``(low, high)`` per parameter. ``low == high`` fixes a parameter.
    n : int
        Number of samples.
    seed : int | None, optional
        Seed for ``numpy.random.default_rng``.
    """

    bounds: tuple[tuple[float, float], ...]
    n: int
    seed: int | None = None

    def __post_init__(self) -> None:
        bounds = tuple((float(lo), float(hi)) for lo, hi in self.bounds)
        for i, (lo, hi) in enumerate(bounds):
            if lo > hi:
                msg = f"Lower bound exceeds upper bound for parameter {i}: ({lo}, {hi})."
                raise ValueError(msg)
        if self.n < 0:
            msg = f"Number of samples must be non-negative, got {self.n}."
            raise ValueError(msg)
        object.__setattr__(self, "bounds", bounds)

    @property
    def arity(self) -> int:
        return len(self.bounds)

    def __len__(self) -> int:
        return self.n

    def __iter__(self) -> Iterator[Parameters]:
        rng = np.random.default_rng(self.seed)
        low = np.array([lo for lo, _ in self.bounds])
        high = np.array([hi for _, hi in self.bounds])
        for _ in range(self.n):
            yield tuple(float(v) for v in rng.uniform(low, high))


def regular_space_from_mapping(
    parameter_names: Sequence[str], values: dict[str, Sequence[float]]
) -> RegularParameterSpace:
    """Build a regular space from named ranges, ordered by `parameter_names`."""
    missing = [name for name in parameter_names if name not in values]
    if missing:
        msg = f"Missing values for parameters {missing}."
        raise KeyError(msg)
    return RegularParameterSpace(tuple(values[name] for name in parameter_names))
