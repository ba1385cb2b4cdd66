"""
Unit tests for the distance functions.
"""

import pytest
import numpy as np
from knn.distance import (
    euclidean,
    manhattan,
    get_distance_function,
    DISTANCE_FUNCTIONS
)


@pytest.fixture
def vectors():
    np.random.seed(42)
    return [np.random.randn(5) * 10 for _ in range(6)]


@pytest.mark.parametrize("distance", [euclidean, manhattan])
def test_distance_non_negative(distance, vectors):
    for a in vectors:
        for b in vectors:
            assert distance(a, b) >= 0.0


@pytest.mark.parametrize("distance", [euclidean, manhattan])
def test_distance_to_self_is_zero(distance, vectors):
    for a in vectors:
        assert distance(a, a) == 0.0


@pytest.mark.parametrize("distance", [euclidean, manhattan])
def test_distance_commutative(distance, vectors):
    for a in vectors:
        for b in vectors:
            assert distance(a, b) == distance(b, a)


def test_euclidean_known_value():
    assert euclidean([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)


def test_manhattan_known_value():
    assert manhattan([0.0, 0.0], [3.0, -4.0]) == pytest.approx(7.0)


def test_distance_returns_float_for_vectors():
    assert isinstance(euclidean([1.0], [2.0]), float)
    assert isinstance(manhattan([1.0], [2.0]), float)


def test_distance_against_rows():
    """A query against a 2-D block returns one distance per row."""
    rows = np.array([[0.0, 0.0], [3.0, 4.0], [1.0, 1.0]])

    np.testing.assert_allclose(euclidean([0.0, 0.0], rows), [0.0, 5.0, np.sqrt(2.0)])
    np.testing.assert_allclose(manhattan([0.0, 0.0], rows), [0.0, 7.0, 2.0])


@pytest.mark.parametrize("distance", [euclidean, manhattan])
def test_distance_length_mismatch(distance):
    with pytest.raises(ValueError):
        distance([1.0, 2.0], [1.0, 2.0, 3.0])

    with pytest.raises(ValueError):
        distance([1.0, 2.0], np.zeros((4, 3)))


def test_get_distance_function():
    assert get_distance_function("euclidean") is euclidean
    assert get_distance_function("Manhattan") is manhattan
    assert set(DISTANCE_FUNCTIONS) == {"euclidean", "manhattan"}


def test_get_distance_function_unknown():
    with pytest.raises(ValueError, match="unknown distance algorithm"):
        get_distance_function("chebyshev")
