"""
KNN classification of a single datapoint.

:func:`classify_datapoint` ranks every record by its distance to the
datapoint, takes the nearest ``k`` and counts how often each label occurs
among them.
"""

from collections import Counter
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from knn.distance import DistanceFunction


def nearest_indices(distances: np.ndarray, k: int) -> np.ndarray:
    """
    Return the indices of the ``k`` smallest distances, nearest first.

    The sort is stable so equidistant records keep their original order.
    NaN distances sort after every number.
    """
    order = np.argsort(distances, kind='stable')

    return order[:min(k, len(order))]


def classify_datapoint(
    k: int,
    features: np.ndarray,
    labels: Sequence[str],
    distance: DistanceFunction,
    datapoint: np.ndarray
) -> Tuple[int, Counter]:
    """
    Perform the KNN algorithm for a datapoint against the provided records.

    Args:
        k: Number of neighbors to look up (>= 1)
        features: Records of shape (n_records, n_features)
        labels: Label of every record
        distance: Distance function taking (datapoint, rows)
        datapoint: Vector of shape (n_features,)

    Returns:
        Tuple of (effective_k, tally) where effective_k is ``min(k, n_records)``
        and tally counts the labels of the nearest effective_k records. The
        tally's insertion order follows the neighbors, nearest first.
    """
    if len(labels) == 0:
        return 0, Counter()

    distances = np.asarray(distance(datapoint, features), dtype=np.float64)
    nearest = nearest_indices(distances, k)

    tally = Counter()

    for index in nearest:
        tally[labels[index]] += 1

    return len(nearest), tally


def majority_label(tally: Counter) -> Optional[str]:
    """
    Return the most frequent label of a tally, or None when it is empty.

    Ties go to the label that was inserted first.
    """
    if not tally:
        return None

    # most_common keeps insertion order between equal counts
    return tally.most_common(1)[0][0]


def label_percentages(tally: Counter, effective_k: int) -> Dict[str, float]:
    """Fraction of the neighbors that carry each label."""
    if effective_k == 0:
        return {}

    return {label: count / effective_k for label, count in tally.items()}
