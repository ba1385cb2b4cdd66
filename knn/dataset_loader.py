"""
CSV Dataset Loader

This module handles loading labeled numeric records from a CSV file and
splitting them into train/test sets. The loaded ``Dataset`` owns all of the
feature data; the splitter and the search engine only ever work with index
arrays into it.
"""

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

ColumnType = Union[int, str]


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Labeled records loaded from a CSV file.

    Attributes:
        features: Read-only array of shape (n_records, n_columns)
        labels: Array of label strings of shape (n_records,)
        columns: CSV column index of each feature column
        column_names: Header name of each feature column
    """

    features: np.ndarray
    labels: np.ndarray
    columns: Tuple[int, ...]
    column_names: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        features = np.asarray(self.features, dtype=np.float64)

        # an empty list has no column dimension yet
        if features.ndim == 1 and features.size == 0:
            features = features.reshape(0, len(self.columns))

        features = np.array(features, dtype=np.float64, ndmin=2)

        if features.shape[1] != len(self.columns):
            raise ValueError(
                f"feature arity {features.shape[1]} does not match {len(self.columns)} columns"
            )

        labels = np.array([str(label) for label in self.labels], dtype=object)

        if labels.shape[0] != features.shape[0]:
            raise ValueError(
                f"got {labels.shape[0]} labels for {features.shape[0]} records"
            )

        features.setflags(write=False)
        labels.setflags(write=False)

        object.__setattr__(self, 'features', features)
        object.__setattr__(self, 'labels', labels)
        object.__setattr__(self, 'columns', tuple(int(col) for col in self.columns))

        if not self.column_names:
            object.__setattr__(self, 'column_names', tuple(str(col) for col in self.columns))

    def __len__(self) -> int:
        return self.features.shape[0]

    @property
    def column_count(self) -> int:
        return len(self.columns)


def parse_column(given: str) -> ColumnType:
    """
    Parse a command line column reference.

    A non-negative integer is a zero based column index, anything else is
    treated as a header name.
    """
    text = given.strip()

    if text.isdecimal():
        return int(text)

    return given


def parse_datapoint(given: str) -> np.ndarray:
    """
    Parse a comma delimited list of numbers.

    Raises:
        ValueError: If any of the values is not a number
    """
    try:
        return np.array([float(value) for value in given.split(',')], dtype=np.float64)
    except ValueError:
        raise ValueError(f"failed to parse datapoint: {given}")


def _resolve(headers: Dict[str, int], header_count: int, column: ColumnType, kind: str) -> int:
    if isinstance(column, int):
        if column >= header_count:
            if kind == 'label':
                raise ValueError(f"label index is out of range for known headers. column index: {column}")
            raise ValueError(f"index is out of range for known headers. column index: {column}")

        return column

    if column not in headers:
        avail = ", ".join(headers)
        if kind == 'label':
            raise ValueError(
                f"unknown label column header specified. column: {column}\navail: {avail}"
            )
        raise ValueError(f"unknown column header specified. column: {column}\navail: {avail}")

    return headers[column]


def resolve_columns(
    header: Optional[Sequence[str]],
    label: ColumnType,
    columns: Sequence[ColumnType]
) -> Tuple[int, List[int]]:
    """
    Resolve the label and feature column references to CSV column indices.

    Args:
        header: Header names of the CSV, or None if the file has no header row
        label: Label column as an index or header name
        columns: Feature columns as indices or header names

    Returns:
        Tuple of (label_index, column_indices)

    Raises:
        ValueError: If a name is unknown, an index is out of range, or a name
            is given for a file without a header
    """
    if header is None:
        for column in columns:
            if not isinstance(column, int):
                raise ValueError(
                    f"no headers were specified in the csv but given a named column. column: {column}"
                )

        if not isinstance(label, int):
            raise ValueError(
                f"no headers were specified in the csv but given a named label column. column: {label}"
            )

        return label, list(columns)

    headers = {}

    for index, name in enumerate(header):
        headers.setdefault(str(name), index)

    resolved = [_resolve(headers, len(header), column, 'column') for column in columns]

    return _resolve(headers, len(header), label, 'label'), resolved


def _parse_cell(record: Sequence, row: int, column: int) -> float:
    if column >= len(record) or pd.isna(record[column]):
        raise ValueError(f"column data not found. row: {row + 1} column index: {column + 1}")

    try:
        return float(record[column])
    except ValueError:
        raise ValueError(f"failed to parse column data. row: {row + 1} column index: {column + 1}")


def load_csv_dataset(
    file_path: str,
    label: ColumnType,
    columns: Sequence[ColumnType],
    has_header: bool = True
) -> Dataset:
    """
    Load labeled records from a CSV file.

    Every requested feature column must hold numeric values; the label column
    is read as text.

    Args:
        file_path: Path to the CSV file
        label: Label column as an index or header name
        columns: Feature columns as indices or header names
        has_header: Whether the first row of the file is a header row

    Returns:
        Dataset with one record per data row

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If no columns are given, a column can't be resolved or a
            cell can't be parsed
    """
    if not columns:
        raise ValueError("no columns specified to pull numeric data from")

    if not os.path.exists(file_path):
        raise FileNotFoundError(f"the requested csv file was not found: {file_path}")

    try:
        frame = pd.read_csv(
            file_path,
            header=0 if has_header else None,
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.EmptyDataError:
        frame = pd.DataFrame()
    except pd.errors.ParserError as e:
        raise ValueError(f"failed to parse csv file: {e}")

    header = [str(name) for name in frame.columns] if has_header else None
    label_index, column_indices = resolve_columns(header, label, columns)

    values = frame.to_numpy(dtype=object)
    features = np.empty((len(values), len(column_indices)), dtype=np.float64)
    labels = []

    for row, record in enumerate(values):
        for position, column in enumerate(column_indices):
            features[row, position] = _parse_cell(record, row, column)

        if label_index >= len(record) or pd.isna(record[label_index]):
            raise ValueError(f"failed to find label. row: {row + 1} label index: {label_index}")

        labels.append(record[label_index])

    if header is not None:
        names = tuple(header[column] for column in column_indices)
    else:
        names = tuple(str(column) for column in column_indices)

    dataset = Dataset(features, labels, tuple(column_indices), names)

    logger.info(f"Loaded {len(dataset)} records with {dataset.column_count} columns from {file_path}")

    return dataset


def get_dataset_info(dataset: Dataset) -> Dict:
    """
    Extract metadata and statistics from a dataset.

    Returns:
        Dictionary containing:
            - record_count: Total number of records
            - column_count: Number of feature columns
            - columns: CSV column index of each feature column
            - labels: Labels in order of first occurrence
            - records_per_label: Number of records per label
    """
    records_per_label = {}

    for label in dataset.labels:
        records_per_label[label] = records_per_label.get(label, 0) + 1

    return {
        "record_count": len(dataset),
        "column_count": dataset.column_count,
        "columns": list(dataset.columns),
        "labels": list(records_per_label),
        "records_per_label": records_per_label,
    }


def split_dataset(labels: Sequence[str], test_fraction: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split records into training and testing sets, stratified by label.

    Records are grouped by label in order of first occurrence. Within each
    group the first ``floor(len(group) * test_fraction)`` records go to the
    test set and the rest go to the training set, preserving the original
    order.

    Args:
        labels: Label of every record
        test_fraction: Fraction of each label group to hold out for testing

    Returns:
        Tuple of (train_indices, test_indices) into the original records

    Raises:
        ValueError: If test_fraction is not between 0 and 1
    """
    if not 0.0 <= test_fraction <= 1.0:
        raise ValueError(f"test fraction must be between 0 and 1, got {test_fraction}")

    groups: Dict[str, List[int]] = {}

    for index, label in enumerate(labels):
        groups.setdefault(label, []).append(index)

    train = []
    test = []

    for indices in groups.values():
        amount = math.floor(len(indices) * test_fraction)

        train.extend(indices[amount:])
        test.extend(indices[:amount])

    return np.array(train, dtype=np.intp), np.array(test, dtype=np.intp)
