"""
Console output for predict and search results.
"""

import sys
from typing import List, Sequence

from knn.predict import Prediction
from knn.search import SearchReport


def _format_number(value: float) -> str:
    # whole numbers print without a trailing ".0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_predictions(predictions: Sequence[Prediction], datapoint: Sequence[float]) -> List[str]:
    lines = []
    values = " ".join(_format_number(v) for v in datapoint)

    for prediction in predictions:
        lines.append(f"k value: {prediction.k} | {values}")

        for label, count in prediction.counts.items():
            lines.append(f"  {label}: {count} {prediction.percentages[label]:.2f}")

    return lines


def format_search_trace(report: SearchReport) -> List[str]:
    """Render every candidate evaluated during the search, grouped by k."""
    lines = []
    current_k = None

    for step in report.steps:
        if step.k != current_k:
            current_k = step.k
            lines.append(f"k: {step.k}")

        prefix = "".join(f" {col}" for col in step.selected)

        for candidate in step.candidates:
            lines.append(
                f"       {prefix} {candidate.column} | passed: {candidate.passed} "
                f"{candidate.accuracy:.2f} failed: {candidate.failed} unknown: {candidate.unknown}"
            )

    return lines


def format_search_results(report: SearchReport) -> List[str]:
    lines = []

    for result in report.results:
        cols = "".join(f" {col}" for col in result.columns)
        lines.append(f"k {result.k} % {result.percent:.2f} cols:{cols}")

    return lines


def print_predictions(predictions: Sequence[Prediction], datapoint: Sequence[float], file=None) -> None:
    file = file or sys.stdout

    for line in format_predictions(predictions, datapoint):
        print(line, file=file)


def print_search_report(report: SearchReport, trace: bool = True, file=None) -> None:
    """
    Print the search outcome.

    Args:
        report: Result of knn_search
        trace: Whether to print every evaluated candidate before the summary
        file: Output stream (default: stdout)
    """
    file = file or sys.stdout

    print(f"train size: {report.train_size} test size: {report.test_size}", file=file)

    if trace:
        for line in format_search_trace(report):
            print(line, file=file)

    for line in format_search_results(report):
        print(line, file=file)
