"""
This module defines the Direction class, which stores an N x N orientation
matrix as a flattened tuple of floats (row-major order, the layout used by
``sitk.Image.GetDirection``). Both 2D (4 values) and 3D (9 values)
orientations are supported.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, TypeAlias

import numpy as np

FlattenedMatrix: TypeAlias = Tuple[float, ...]


@dataclass(frozen=True, eq=True)
class Direction:
    """Represent a directional matrix for image orientation.

    Attributes
    ----------
    matrix : FlattenedMatrix
        Flattened row-major representation of a square matrix.
    """

    matrix: FlattenedMatrix

    def __post_init__(self) -> None:
        length = len(self.matrix)
        dim = math.isqrt(length)
        if dim < 2 or dim * dim != length:
            msg = (
                "Direction must be a square matrix of at least 2x2 values."
                f" Got {length} values."
            )
            raise ValueError(msg)
        object.__setattr__(
            self, "matrix", tuple(float(v) for v in self.matrix)
        )

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> Direction:
        """
        Create a Direction instance from a nested square matrix.

        Raises
        ------
        ValueError
            If the input isn't square.
        """
        size = len(matrix)
        for row in matrix:
            if len(row) != size:
                msg = f"Matrix must be square. Got {size} rows of {len(row)}."
                raise ValueError(msg)
        return cls(matrix=tuple(value for row in matrix for value in row))

    @classmethod
    def identity(cls, dimension: int) -> Direction:
        return cls(matrix=tuple(np.identity(dimension).flatten()))

    @property
    def dimension(self) -> int:
        return math.isqrt(len(self.matrix))

    def to_matrix(self) -> list[list[float]]:
        """Convert the flattened row-major array back to a nested matrix."""
        dim = self.dimension
        return [list(self.matrix[i * dim : (i + 1) * dim]) for i in range(dim)]

    def to_numpy(self) -> np.ndarray:
        return np.array(self.matrix, dtype=np.float64).reshape(
            self.dimension, self.dimension
        )

    def is_normalized(self, tol: float = 1e-6) -> bool:
        """Check that every row has (almost) unit length."""
        return all(
            np.isclose(np.linalg.norm(row), 1.0, atol=tol)
            for row in self.to_matrix()
        )

    def is_invertible(self, tol: float = 1e-12) -> bool:
        return bool(abs(np.linalg.det(self.to_numpy())) > tol)

    def __iter__(self) -> Iterator[float]:
        """Allow the Direction instance to be passed directly as a 1D array."""
        yield from self.matrix

    def __repr__(self) -> str:
        formatted_rows = [
            "[" + ",".join(f"{value:>4.2f}" for value in row) + "]"
            for row in self.to_matrix()
        ]
        return f"Direction({', '.join(formatted_rows)})"
