"""
Distance Functions

This module provides the distance algorithms used by the KNN classifier.
Both functions accept either two vectors or a single query vector and a
2-D block of rows, in which case the distance to every row is returned.
"""

import numpy as np
from typing import Callable, Dict, Union


DistanceFunction = Callable[[np.ndarray, np.ndarray], Union[float, np.ndarray]]


def _prepare(a_data, b_data):
    a = np.asarray(a_data, dtype=np.float64)
    b = np.asarray(b_data, dtype=np.float64)

    if a.shape[-1:] != b.shape[-1:]:
        raise ValueError(
            f"vector length mismatch: {a.shape[-1:]} vs {b.shape[-1:]}"
        )

    return a, b


def euclidean(a_data, b_data) -> Union[float, np.ndarray]:
    """
    Calculate the euclidean (L2) distance between two sets of datapoints.

    Args:
        a_data: Vector of shape (n_features,)
        b_data: Vector of shape (n_features,) or rows of shape (n_rows, n_features)

    Returns:
        A float for two vectors, otherwise an array of shape (n_rows,)

    Raises:
        ValueError: If the feature lengths differ
    """
    a, b = _prepare(a_data, b_data)
    result = np.sqrt(np.sum((a - b) ** 2, axis=-1))

    return float(result) if np.ndim(result) == 0 else result


def manhattan(a_data, b_data) -> Union[float, np.ndarray]:
    """
    Calculate the manhattan (L1) distance between two sets of datapoints.

    Shapes follow the same rules as :func:`euclidean`.
    """
    a, b = _prepare(a_data, b_data)
    result = np.sum(np.abs(a - b), axis=-1)

    return float(result) if np.ndim(result) == 0 else result


DISTANCE_FUNCTIONS: Dict[str, DistanceFunction] = {
    'euclidean': euclidean,
    'manhattan': manhattan,
}


def get_distance_function(name: str) -> DistanceFunction:
    """
    Resolve an algorithm name to its distance function.

    Raises:
        ValueError: If the name is not a known algorithm
    """
    try:
        return DISTANCE_FUNCTIONS[name.strip().lower()]
    except KeyError:
        valid = ", ".join(sorted(DISTANCE_FUNCTIONS))
        raise ValueError(f"unknown distance algorithm: {name} (expected one of: {valid})")
