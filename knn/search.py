"""
Greedy Forward Feature Search

For every k value the search starts with no selected columns and repeatedly
adds the available column that gives the best classification accuracy on the
held out test records, until every column has been selected.

Accuracy is the fraction of test records whose majority label among their
nearest training records matches their own label. Test records that get no
neighbors at all are counted as unknown.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from knn.classify import classify_datapoint, majority_label
from knn.dataset_loader import Dataset, split_dataset
from knn.distance import DistanceFunction
from knn.kvalue import KValue


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateScore:
    """Outcome of testing one available column on top of the current selection."""

    column: int
    passed: int
    failed: int
    unknown: int
    accuracy: float


@dataclass(frozen=True)
class SearchStep:
    """Every candidate tried during one selection step."""

    k: int
    selected: Tuple[int, ...]
    candidates: Tuple[CandidateScore, ...]


@dataclass(frozen=True)
class SearchResult:
    """The selection committed by one step: k, accuracy in percent and the selected columns."""

    k: int
    percent: float
    columns: Tuple[int, ...]


@dataclass(frozen=True)
class SearchReport:
    train_size: int
    test_size: int
    results: Tuple[SearchResult, ...]
    steps: Tuple[SearchStep, ...]


def evaluate_columns(
    dataset: Dataset,
    train: np.ndarray,
    test: np.ndarray,
    positions: Sequence[int],
    k: int,
    distance: DistanceFunction
) -> Tuple[int, int, int]:
    """
    Classify every test record using only the given feature positions.

    Args:
        dataset: Dataset owning the records
        train: Indices of the records used as neighbors
        test: Indices of the records to classify
        positions: Feature positions (not CSV columns) to project onto
        k: Number of neighbors
        distance: Distance function

    Returns:
        Tuple of (passed, failed, unknown)
    """
    positions = list(positions)
    train_features = dataset.features[np.ix_(train, positions)]
    train_labels = dataset.labels[train]

    passed = 0
    failed = 0
    unknown = 0

    for index in test:
        datapoint = dataset.features[index, positions]

        _, tally = classify_datapoint(k, train_features, train_labels, distance, datapoint)
        predicted = majority_label(tally)

        if predicted is None:
            unknown += 1
        elif predicted == dataset.labels[index]:
            passed += 1
        else:
            failed += 1

    return passed, failed, unknown


def _select_columns(
    dataset: Dataset,
    train: np.ndarray,
    test: np.ndarray,
    k: int,
    distance: DistanceFunction
) -> Tuple[List[SearchResult], List[SearchStep]]:
    selected: List[int] = []
    available = list(range(dataset.column_count))
    results = []
    steps = []

    while available:
        candidates = []
        best = None

        for avail_index, position in enumerate(available):
            passed, failed, unknown = evaluate_columns(
                dataset, train, test, selected + [position], k, distance
            )
            accuracy = passed / len(test) if len(test) else 0.0

            candidates.append(CandidateScore(
                column=dataset.columns[position],
                passed=passed,
                failed=failed,
                unknown=unknown,
                accuracy=accuracy,
            ))

            logger.debug(
                f"k={k} cols={[dataset.columns[p] for p in selected]} + {dataset.columns[position]}: "
                f"passed={passed} failed={failed} unknown={unknown}"
            )

            # strict comparison, earlier columns win ties
            if best is None or accuracy > best[1]:
                best = (avail_index, accuracy)

        steps.append(SearchStep(
            k=k,
            selected=tuple(dataset.columns[p] for p in selected),
            candidates=tuple(candidates),
        ))

        best_index, best_accuracy = best
        selected.append(available.pop(best_index))

        result = SearchResult(
            k=k,
            percent=best_accuracy * 100.0,
            columns=tuple(dataset.columns[p] for p in selected),
        )
        results.append(result)

        logger.info(f"k={k} selected cols {list(result.columns)} ({result.percent:.2f}%)")

    return results, steps


def knn_search(
    dataset: Dataset,
    k_value: KValue,
    distance: DistanceFunction,
    test_fraction: float = 0.25
) -> SearchReport:
    """
    Run the greedy forward feature search for every requested k value.

    The dataset is split per label with :func:`split_dataset`; the k range is
    clamped to the number of training records.

    Args:
        dataset: Records to search over; all of its columns are candidates
        k_value: k values to evaluate
        distance: Distance function
        test_fraction: Fraction of each label group held out for testing

    Returns:
        SearchReport with one SearchResult per selection step, ordered by k
        and then by step

    Raises:
        ValueError: If the dataset has no columns or test_fraction is not
            between 0 and 1
    """
    if dataset.column_count == 0:
        raise ValueError("no columns specified to pull numeric data from")

    train, test = split_dataset(dataset.labels, test_fraction)

    logger.info(f"train size: {len(train)} test size: {len(test)}")

    results = []
    steps = []

    for k in k_value.get_range(len(train)):
        k_results, k_steps = _select_columns(dataset, train, test, k, distance)

        results.extend(k_results)
        steps.extend(k_steps)

    return SearchReport(
        train_size=len(train),
        test_size=len(test),
        results=tuple(results),
        steps=tuple(steps),
    )
