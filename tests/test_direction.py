import numpy as np
import pytest

from augtools.coretypes import Direction


def test_direction_init_valid_2d_and_3d():
    """2x2 and 3x3 flattened matrices are accepted."""
    assert Direction((1, 0, 0, 1)).dimension == 2
    assert Direction((1, 0, 0, 0, 1, 0, 0, 0, 1)).dimension == 3


@pytest.mark.parametrize("values", [(1.0,), (1.0, 2.0), (1.0,) * 8])
def test_direction_init_not_square(values):
    with pytest.raises(ValueError, match="square matrix"):
        Direction(values)


def test_from_matrix_and_to_matrix():
    matrix = [[0.0, 1.0], [-1.0, 0.0]]
    direction = Direction.from_matrix(matrix)
    assert direction.matrix == (0.0, 1.0, -1.0, 0.0)
    assert direction.to_matrix() == matrix


def test_from_matrix_ragged():
    with pytest.raises(ValueError, match="square"):
        Direction.from_matrix([[1.0, 0.0], [0.0]])


def test_identity():
    direction = Direction.identity(3)
    np.testing.assert_array_equal(direction.to_numpy(), np.identity(3))
    assert direction.is_normalized()


@pytest.mark.parametrize(
    "matrix, expected",
    [
        ((1.0, 0.0, 0.0, 1.0), True),
        ((0.6, -0.8, 0.8, 0.6), True),
        ((2.0, 0.0, 0.0, 4.0), False),
    ],
)
def test_is_normalized(matrix, expected):
    assert Direction(matrix).is_normalized() is expected


def test_is_invertible():
    assert Direction.identity(2).is_invertible()
    assert not Direction((1.0, 2.0, 2.0, 4.0)).is_invertible()


def test_iter_and_hash():
    """Directions can be passed to SimpleITK and collected in sets."""
    direction = Direction.identity(2)
    assert tuple(direction) == (1.0, 0.0, 0.0, 1.0)
    assert len({direction, Direction.identity(2)}) == 1
