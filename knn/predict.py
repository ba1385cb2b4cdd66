"""
Predict the label distribution of a datapoint for every requested k value.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from knn.classify import classify_datapoint, label_percentages
from knn.dataset_loader import Dataset
from knn.distance import DistanceFunction
from knn.kvalue import KValue


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prediction:
    k: int
    effective_k: int
    counts: Dict[str, int]
    percentages: Dict[str, float]


def knn_predict(
    dataset: Dataset,
    datapoint,
    k_value: KValue,
    distance: DistanceFunction
) -> List[Prediction]:
    """
    Classify a datapoint against every record of the dataset.

    Args:
        dataset: Records to use as neighbors
        datapoint: Vector with one value per dataset column
        k_value: k values to evaluate; the range is clamped to the record count
        distance: Distance function to rank neighbors with

    Returns:
        One Prediction per evaluated k value, in ascending k order

    Raises:
        ValueError: If the dataset has no columns or the datapoint length
            doesn't match the number of columns
    """
    if dataset.column_count == 0:
        raise ValueError("no columns specified to pull numeric data from")

    datapoint = np.asarray(datapoint, dtype=np.float64)

    if datapoint.ndim != 1 or datapoint.shape[0] != dataset.column_count:
        raise ValueError("number of datapoints does not match number of columns")

    predictions = []

    for k in k_value.get_range(len(dataset)):
        effective_k, tally = classify_datapoint(
            k, dataset.features, dataset.labels, distance, datapoint
        )

        logger.debug(f"k={k}: {effective_k} neighbors, tally {dict(tally)}")

        predictions.append(Prediction(
            k=k,
            effective_k=effective_k,
            counts=dict(tally),
            percentages=label_percentages(tally, effective_k),
        ))

    if not predictions:
        logger.warning(f"No k values in {k_value} are below the record count ({len(dataset)})")

    return predictions
