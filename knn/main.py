"""
K Nearest Neighbors command line tool

Loads labeled records from a CSV file and either predicts the label
distribution of a datapoint or searches for the best performing set of
columns.

Usage:
    knn-search -f iris.csv predict -c 0 -c 1 --label species --datapoint 5.1,3.5
    knn-search -f iris.csv predict -k 1-9,2 --algo manhattan -c sepal_length -c sepal_width --label 4 --datapoint 5.1,3.5
    knn-search -f iris.csv search -k 3-10 -c 0 -c 1 -c 2 -c 3 --label species --test 0.3
    knn-search --config knn.json -f data.csv --no-header search -c 0 -c 1 --label 2
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from knn.dataset_loader import Dataset, get_dataset_info, load_csv_dataset, parse_column, parse_datapoint
from knn.distance import DISTANCE_FUNCTIONS, get_distance_function
from knn.kvalue import KValue
from knn.predict import knn_predict
from knn.report import print_predictions, print_search_report
from knn.search import knn_search
from knn.state import get_config_value, load_config, merge_config
from knn.utils import setup_logging


logger = logging.getLogger(__name__)


def _argument_type(parse):
    def convert(given: str):
        try:
            return parse(given)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e))

    convert.__name__ = parse.__name__
    return convert


def _fraction(given: str) -> float:
    value = float(given)

    if not 0.0 <= value <= 1.0:
        raise ValueError(f"test fraction must be between 0 and 1, got {given}")

    return value


def _add_common_arguments(parser: argparse.ArgumentParser, k_help: str) -> None:
    parser.add_argument(
        '-k',
        type=_argument_type(KValue.parse),
        default=None,
        help=k_help
    )

    parser.add_argument(
        '--algo',
        type=_argument_type(get_distance_function),
        default=None,
        metavar='{' + ','.join(DISTANCE_FUNCTIONS) + '}',
        help='Algorithm to use when calculating distances (default: euclidean)'
    )

    parser.add_argument(
        '-c', '--col',
        dest='columns',
        action='append',
        type=parse_column,
        default=[],
        help='Column to use as a datapoint, by header name or zero based index (repeatable)'
    )

    parser.add_argument(
        '--label',
        type=parse_column,
        required=True,
        help='Column to use as the label, by header name or zero based index'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='knn-search',
        description="A k nearest neighbors (knn) calculator that loads a csv file "
                    "containing records to classify datapoints or search for the "
                    "best columns to classify with.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
K values:
  5          a single k value
  3-10       every k value from 3 to 10 (inclusive)
  2-10,3     every third k value from 2 to 10 (2, 5, 8)
        """
    )

    parser.add_argument(
        '-f', '--file',
        type=str,
        required=True,
        help='Path to the csv file to load'
    )

    parser.add_argument(
        '--no-header',
        action='store_true',
        default=None,
        help='Indicates that the csv contains no header row'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a JSON configuration file with default settings'
    )

    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Logging level (default: WARNING)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    predict = subparsers.add_parser('predict', help='Predict the label of a datapoint')
    _add_common_arguments(predict, 'The number of neighbors to lookup (default: 3)')
    predict.add_argument(
        '--datapoint',
        type=_argument_type(parse_datapoint),
        required=True,
        help='A comma delimited list of numbers to estimate the label for'
    )

    search = subparsers.add_parser('search', help='Search for the columns that classify best')
    _add_common_arguments(search, 'The number of neighbors to lookup (default: 3-10)')
    search.add_argument(
        '--test',
        type=_argument_type(_fraction),
        default=None,
        help='The fraction of each label group to test against (default: 0.25)'
    )
    search.add_argument(
        '--no-trace',
        action='store_true',
        help='Only print the selected columns, not every evaluated candidate'
    )

    return parser


def run_predict(args: argparse.Namespace, dataset: Dataset, config: Dict) -> None:
    k_value = args.k if args.k is not None else KValue.parse(get_config_value(config, 'predict.k'))
    distance = args.algo or get_distance_function(config['algo'])

    predictions = knn_predict(dataset, args.datapoint, k_value, distance)
    print_predictions(predictions, args.datapoint)


def run_search(args: argparse.Namespace, dataset: Dataset, config: Dict) -> None:
    k_value = args.k if args.k is not None else KValue.parse(get_config_value(config, 'search.k'))
    distance = args.algo or get_distance_function(config['algo'])
    test_fraction = args.test if args.test is not None else get_config_value(config, 'search.test')

    report = knn_search(dataset, k_value, distance, test_fraction)
    print_search_report(report, trace=not args.no_trace)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the knn command line tool.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = merge_config(load_config(args.config) if args.config else {})

        setup_logging(args.log_level or config['log_level'])

        if not args.columns:
            raise ValueError("no columns specified to pull numeric data from")

        no_header = args.no_header if args.no_header is not None else config['no_header']

        if args.command == 'predict' and len(args.datapoint) != len(args.columns):
            raise ValueError("number of datapoints does not match number of columns")

        dataset = load_csv_dataset(args.file, args.label, args.columns, has_header=not no_header)

        if len(dataset) == 0:
            raise ValueError("the csv file contains no records")

        info = get_dataset_info(dataset)
        logger.info(f"Records per label: {info['records_per_label']}")

        if args.command == 'predict':
            run_predict(args, dataset, config)
        else:
            run_search(args, dataset, config)

    except (ValueError, FileNotFoundError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
