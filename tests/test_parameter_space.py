import numpy as np
import pytest

from augtools.augment import (
    RandomParameterSpace,
    RegularParameterSpace,
    regular_space_from_mapping,
)


def test_regular_space_length_before_iteration():
    """Five ranges of three values give 3**5 samples."""
    space = RegularParameterSpace([np.linspace(-1, 1, 3)] * 5)
    assert space.arity == 5
    assert len(space) == 243
    assert len(list(space)) == 243


def test_regular_space_is_restartable():
    space = RegularParameterSpace([[0.0, 1.0], [2.0], [3.0, 4.0, 5.0]])
    first = list(space)
    assert first == list(space)
    assert first[0] == (0.0, 2.0, 3.0)
    assert first[1] == (0.0, 2.0, 4.0)


def test_regular_space_empty_range():
    assert len(RegularParameterSpace([[1.0], []])) == 0
    assert list(RegularParameterSpace([])) == []


def test_random_space_seeded():
    space = RandomParameterSpace([(0.0, 1.0), (-5.0, -5.0), (2.0, 4.0)], n=10, seed=3)
    samples = list(space)
    assert len(space) == 10
    assert samples == list(space)
    for a, b, c in samples:
        assert 0.0 <= a <= 1.0
        assert b == -5.0
        assert 2.0 <= c <= 4.0


def test_random_space_invalid():
    with pytest.raises(ValueError, match="Lower bound"):
        RandomParameterSpace([(1.0, 0.0)], n=2)
    with pytest.raises(ValueError):
        RandomParameterSpace([(0.0, 1.0)], n=-1)


def test_regular_space_from_mapping():
    space = regular_space_from_mapping(
        ("scale", "angle"), {"angle": [0.0, 0.1], "scale": [1.0]}
    )
    assert list(space) == [(1.0, 0.0), (1.0, 0.1)]
    with pytest.raises(KeyError):
        regular_space_from_mapping(("scale", "angle"), {"scale": [1.0]})
